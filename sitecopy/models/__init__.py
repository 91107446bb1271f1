# importa los modelos para poblar Base.metadata (alembic / create_all)
from sitecopy.models.content import ContentEntry  # noqa: F401
from sitecopy.models.user import User  # noqa: F401
