from kogito.handlers import kogitoapp, probes

__all__ = ["kogitoapp", "probes"]
