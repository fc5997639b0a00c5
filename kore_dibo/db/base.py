# kore_dibo/db/base.py
# Import every model so Base.metadata knows all tables.
from kore_dibo.db.base_class import Base  # noqa

from kore_dibo.models.user import User  # noqa
from kore_dibo.models.verification_code import VerificationCode  # noqa
from kore_dibo.models.assignment import Assignment  # noqa
from kore_dibo.models.bid import Bid  # noqa
from kore_dibo.models.message import Message  # noqa
from kore_dibo.models.review import Review  # noqa
from kore_dibo.models.doubt import Doubt, Answer  # noqa
from kore_dibo.models.notification import Notification  # noqa
