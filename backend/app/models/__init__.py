from app.models.community import Community, LOCALE_NAMES
from app.models.user import User
from app.models.transaction_process import (
    PROCESS_KINDS,
    PROCESS_NONE,
    PROCESS_POSTPAY,
    PROCESS_PREAUTHORIZE,
    TransactionProcess,
)
from app.models.payment_gateway import PaymentGateway
from app.models.category import Category
from app.models.listing_shape import ListingShape, listing_shape_categories
from app.models.listing import Listing
from app.models.platform_event import PlatformEvent
