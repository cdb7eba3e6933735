"""Code generation for the Next.js + Prisma app."""

from .base import CUSTOM_MARKER, CompositeGenerator, Generator, GeneratorResult, is_customized
from .generators import (
    GENERATOR_CLASSES,
    ApiRoutesGenerator,
    AuthGenerator,
    EnvFileGenerator,
    HooksGenerator,
    NextConfigGenerator,
    PrismaSchemaGenerator,
    PrismaServiceGenerator,
    SystemGenerator,
)

__all__ = [
    "CUSTOM_MARKER",
    "Generator",
    "GeneratorResult",
    "CompositeGenerator",
    "is_customized",
    "PrismaSchemaGenerator",
    "PrismaServiceGenerator",
    "ApiRoutesGenerator",
    "HooksGenerator",
    "AuthGenerator",
    "EnvFileGenerator",
    "NextConfigGenerator",
    "SystemGenerator",
    "GENERATOR_CLASSES",
]
