from .cdrom import CD_PATH_KEY, CdromState, CreateCdromConfig, CreateCdromStep

__all__ = ["CD_PATH_KEY", "CdromState", "CreateCdromConfig", "CreateCdromStep"]
