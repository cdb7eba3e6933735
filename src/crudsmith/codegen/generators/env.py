"""
Environment file generator.

Generates or completes:
- .env (DATABASE_URL, NODE_ENV, JWT_SECRET)

Keys already present keep their values; only missing keys are appended.
"""

import re
import secrets

from ..base import Generator, GeneratorResult

ENV_LINE = re.compile(r"^\s*(?:export\s+)?([A-Za-z_][A-Za-z0-9_]*)\s*=")


def parse_env_keys(text: str) -> set[str]:
    """Keys assigned in a dotenv file."""
    keys = set()
    for line in text.splitlines():
        if line.lstrip().startswith("#"):
            continue
        match = ENV_LINE.match(line)
        if match:
            keys.add(match.group(1))
    return keys


class EnvFileGenerator(Generator):
    """Creates the app's .env or appends the keys it lacks."""

    name = "env"

    def required_values(self) -> dict[str, str]:
        return {
            "DATABASE_URL": self.config.database.url,
            "NODE_ENV": self.config.node_env,
            "JWT_SECRET": secrets.token_hex(32),
        }

    def generate(self) -> GeneratorResult:
        result = GeneratorResult()
        path = self.resolve("env_file")

        existing = path.read_text(encoding="utf-8") if path.exists() else ""
        present = parse_env_keys(existing)
        missing = {k: v for k, v in self.required_values().items() if k not in present}

        if not missing:
            result.files_skipped.append(path)
            return result

        lines = [f'{key}="{value}"' for key, value in missing.items()]
        content = existing
        if content and not content.endswith("\n"):
            content += "\n"
        content += "\n".join(lines) + "\n"

        self._write_file(path, content, result)
        result.add_artifact("env_keys_added", sorted(missing))
        return result
