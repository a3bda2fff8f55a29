"""DapDip notification delivery and token metering service.

The package is laid out in layers: ``domain`` holds entities and errors,
``application`` the use cases, ``infrastructure`` persistence and delivery
adapters, ``interfaces`` the HTTP API and ``client`` the notification center
consumed by connected sessions.
"""

__version__ = "0.1.0"
