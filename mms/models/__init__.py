from mms.models.models import *  # noqa: F401,F403
from mms.models.models import __all__  # noqa: F401
