"""Shared pytest fixtures for crudsmith tests."""

from pathlib import Path

import pytest

from crudsmith.core.config import CrudsmithConfig
from crudsmith.core.ir import TypesModule
from crudsmith.core.types_parser import parse_types

SAMPLE_TYPES = """\
export type Role = 'admin' | 'guest';

export interface User {
  id: string;
  email: string;
  name: string;
  password: string;
  role: Role;
  createdAt: Date;
}

export interface Room {
  id: string;
  name: string;
  capacity: number; // max guests
  pricePerNight: number;
  amenities: string[];
}

export interface Booking {
  id: string;
  roomId: string;
  user: string;
  checkIn: Date;
  notes?: string;
  status: 'pending' | 'confirmed';
}
"""

SAMPLE_DATA = """\
import { Room } from './types';

export const rooms: Room[] = [
  { id: '1', name: 'Blue', capacity: 2, pricePerNight: 80, amenities: [] },
];
"""


@pytest.fixture
def sample_types() -> TypesModule:
    """Parsed sample types: User, Room, Booking and a Role alias."""
    return parse_types(SAMPLE_TYPES)


@pytest.fixture
def config() -> CrudsmithConfig:
    """Default configuration."""
    return CrudsmithConfig()


@pytest.fixture
def app_root(tmp_path: Path) -> Path:
    """A minimal Next.js app tree with types and data files."""
    root = tmp_path / "app"
    lib = root / "src" / "lib"
    lib.mkdir(parents=True)
    (lib / "types.ts").write_text(SAMPLE_TYPES)
    (lib / "data.ts").write_text(SAMPLE_DATA)
    (root / "package.json").write_text('{"name": "sample", "scripts": {"build": "next build"}}\n')
    return root
