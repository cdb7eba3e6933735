"""
Complete system generator.

Runs, in order: schema, service, routes, hooks, auth, env, next config.
The input structure is validated first; a successful run records the types
hash so unchanged inputs can be detected next time.
"""

from ...core.errors import GenerationError
from ...core.state import save_state
from ...validation import validate_input_structure
from ..base import CompositeGenerator, Generator, GeneratorResult
from .auth import AuthGenerator
from .env import EnvFileGenerator
from .hooks import HooksGenerator
from .next_config import NextConfigGenerator
from .routes import ApiRoutesGenerator
from .schema import PrismaSchemaGenerator
from .service import PrismaServiceGenerator

GENERATOR_CLASSES: dict[str, type[Generator]] = {
    "schema": PrismaSchemaGenerator,
    "service": PrismaServiceGenerator,
    "routes": ApiRoutesGenerator,
    "hooks": HooksGenerator,
    "auth": AuthGenerator,
    "env": EnvFileGenerator,
    "next-config": NextConfigGenerator,
}


class SystemGenerator(CompositeGenerator):
    """Regenerates every generated part of the app."""

    name = "all"

    def get_generators(self) -> list[Generator]:
        generators = []
        for cls in GENERATOR_CLASSES.values():
            generators.append(
                cls(self.types, self.app_root, self.config, force=self.force, schema=self.schema)
            )
        return generators

    def generate(self) -> GeneratorResult:
        problems = validate_input_structure(self.app_root, self.config)
        if problems:
            raise GenerationError("Invalid input structure:\n  " + "\n  ".join(problems))

        result = super().generate()
        if result.success:
            save_state(
                self.app_root,
                self.resolve("types"),
                [g.name for g in self.get_generators()],
            )
        return result
