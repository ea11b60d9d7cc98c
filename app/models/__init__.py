# Visitor Registry database models
# Import all models here for SQLAlchemy discovery

from app.models.department import Department                 # noqa
from app.models.division import Division                     # noqa
from app.models.public_user import PublicUser                # noqa
from app.models.registry_entry import RegistryEntry          # noqa
from app.models.registry_sequence import RegistrySequence    # noqa
