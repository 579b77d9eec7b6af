from .cutting_records import cutting_record
from .fabrics import fabric
from .manufacturing_orders import manufacturing_order
from .qr_products import qr_product
from .transactions import transaction
