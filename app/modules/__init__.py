"""Domain modules package."""

from app.modules.audit import models as audit_models  # noqa: F401
from app.modules.identity import models as identity_models  # noqa: F401
from app.modules.properties import models as properties_models  # noqa: F401
from app.modules.territories import models as territories_models  # noqa: F401
