# cashdrawer/routers/__init__.py

# Esto expone los módulos para que "from cashdrawer.routers import cash" funcione
from . import cash
from . import settings
