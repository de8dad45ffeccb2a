# Import every model so relationships resolve and Base.metadata is complete.
from openmic.database.db import Base  # noqa: F401
from openmic.models.events import Event  # noqa: F401
from openmic.models.invitations import Invitation  # noqa: F401
from openmic.models.signups import Signup  # noqa: F401
from openmic.models.users import User  # noqa: F401
from openmic.models.venues import Venue  # noqa: F401
