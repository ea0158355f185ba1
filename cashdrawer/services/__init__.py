# cashdrawer/services/__init__.py
