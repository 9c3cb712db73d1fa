"""Service-layer exceptions."""


class FactoryError(Exception):
    """Raised when a runtime entity cannot be created."""


class SaveLoadError(Exception):
    """Raised when save or load operations fail."""


class SceneError(Exception):
    """Raised when a scene id is unknown or a scene cannot be built."""
