"""
Authentication generator.

Generates, when a ``User`` interface with an ``email`` field exists:
- src/lib/auth.ts (bcrypt password checks, jose-signed session cookie)
- src/app/api/auth/login/route.ts
- src/app/api/auth/logout/route.ts
- src/app/api/auth/me/route.ts
"""

import logging

from ...core.ir import IdStrategy
from ..base import Generator, GeneratorResult
from ..templating import render

logger = logging.getLogger(__name__)

PASSWORD_FIELDS = ("password", "passwordHash", "hashedPassword", "motDePasse")


class AuthGenerator(Generator):
    """Generates cookie-based session auth over the User model."""

    name = "auth"

    def generate(self) -> GeneratorResult:
        result = GeneratorResult()

        user = self.schema.model("User")
        if user is None or not user.has_field("email"):
            logger.info("No User model with an email field, skipping auth")
            result.add_artifact("auth", False)
            return result

        password_field = next((name for name in PASSWORD_FIELDS if user.has_field(name)), None)
        if password_field is None:
            result.add_warning("User has no password field; login only checks the email")

        context = {
            "id_ts": "number" if self.config.schema_settings.id_strategy is IdStrategy.AUTOINCREMENT else "string",
            "password_field": password_field,
        }

        lib = self.resolve("service").parent / "auth.ts"
        self._write_file(lib, render("auth/auth.ts.j2", **context), result)

        auth_dir = self.resolve("api_dir") / "auth"
        for route in ("login", "logout", "me"):
            self._write_file(auth_dir / route / "route.ts", render(f"auth/{route}.ts.j2", **context), result)

        result.add_artifact("auth", True)
        return result
