"""httprecorder package -- record and replay HTTP interactions for httpx."""

__version__ = "0.1.0"

_EXPORTS = {
    "ContextTransport": "httprecorder.modules.recorder",
    "ExecutionMode": "httprecorder.modules.recorder",
    "RecorderConfig": "httprecorder.modules.recorder",
    "RecorderSessions": "httprecorder.modules.recorder",
    "RecorderTransport": "httprecorder.modules.recorder",
    "RecordingContext": "httprecorder.modules.recorder",
    "activate": "httprecorder.modules.recorder",
    "create_logging_transport": "httprecorder.modules.recorder",
    "HttpArchiveRepository": "httprecorder.modules.repository",
    "LoggerInteractionRepository": "httprecorder.modules.repository",
    "NullInteractionRepository": "httprecorder.modules.repository",
    "RulesAnonymizer": "httprecorder.modules.anonymize",
    "RulesMatcher": "httprecorder.modules.matching",
    "Interaction": "httprecorder.modules.interaction",
    "InteractionMessage": "httprecorder.modules.interaction",
    "app": "httprecorder.cli",
    "main": "httprecorder.cli",
}

__all__ = sorted(_EXPORTS)


def __getattr__(name: str):
    if name in _EXPORTS:
        import importlib

        return getattr(importlib.import_module(_EXPORTS[name]), name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def __dir__() -> list[str]:
    return sorted(__all__)
