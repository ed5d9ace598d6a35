"""Object key builders for recorded session payloads."""


class StoragePaths:
    """Centralized object key constants and builders."""

    DEV_PREFIX = "dev/"

    @classmethod
    def session_prefix(cls, project_id: int, session_id: int, dev: bool = False) -> str:
        """Prefix of every object of a session: [dev/]{project_id}/{session_id}/.

        A session's payload is split over an untracked number of keys (chunked
        uploads, several payload kinds), so it is addressed by prefix only.
        The trailing slash keeps session 12 from matching session 123.
        """
        env_prefix = cls.DEV_PREFIX if dev else ""
        return f"{env_prefix}{int(project_id)}/{int(session_id)}/"


# Convenience alias
paths = StoragePaths
