from __future__ import annotations

import os
from collections.abc import Mapping


class EnvironmentReader:
    """Reads provider credentials from the process environment.

    ``overrides`` take precedence over ``os.environ``; blank values count as unset.
    """

    def __init__(
        self,
        overrides: Mapping[str, str] | None = None,
        *,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self.overrides = dict(overrides or {})
        self._environ = environ

    def get(self, name: str) -> str | None:
        if not name:
            return None
        value = self.overrides.get(name)
        if value is None:
            environ = self._environ if self._environ is not None else os.environ
            value = environ.get(name)
        if value is None:
            return None
        stripped = value.strip()
        return stripped or None

    __call__ = get
