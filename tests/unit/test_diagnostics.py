"""Tests for build output parsing."""

from crudsmith.build import DiagnosticKind, group_by_kind, parse_build_output

MISSING_EXPORT_OUTPUT = """\
Failed to compile.

./src/app/rooms/page.tsx:4:10
Type error: Module '"@/lib/prisma-service"' has no exported member 'getRoomsByHost'.

  2 | import { useState } from 'react';
> 4 | import { getRoomsByHost } from '@/lib/prisma-service';
"""

BARREL_OUTPUT = """\
./src/components/Header.tsx
Error: Cannot find module '__barrel_optimize__?names=Menu,X!=!lucide-react'
"""


class TestParseBuildOutput:
    def test_missing_export_with_location(self) -> None:
        (diagnostic,) = parse_build_output(MISSING_EXPORT_OUTPUT)
        assert diagnostic.kind is DiagnosticKind.MISSING_EXPORT
        assert diagnostic.symbol == "getRoomsByHost"
        assert diagnostic.module == "@/lib/prisma-service"
        assert diagnostic.file == "./src/app/rooms/page.tsx"
        assert diagnostic.line == 4

    def test_missing_export_named_with_suggestion(self) -> None:
        output = (
            "./src/app/page.tsx:3:10\n"
            "Type error: '\"@/lib/data\"' has no exported member named 'getRoms'. Did you mean 'getRooms'?\n"
        )
        (diagnostic,) = parse_build_output(output)
        assert diagnostic.kind is DiagnosticKind.MISSING_EXPORT
        assert diagnostic.symbol == "getRoms"
        assert diagnostic.module == "@/lib/data"
        assert diagnostic.file == "./src/app/page.tsx"
        assert diagnostic.line == 3

    def test_missing_export_without_module(self) -> None:
        (diagnostic,) = parse_build_output("error: has no exported member named 'getRooms'\n")
        assert diagnostic.kind is DiagnosticKind.MISSING_EXPORT
        assert diagnostic.symbol == "getRooms"
        assert diagnostic.module is None

    def test_barrel_optimize(self) -> None:
        diagnostics = parse_build_output(BARREL_OUTPUT)
        assert diagnostics[0].kind is DiagnosticKind.BARREL_OPTIMIZE
        assert diagnostics[0].module == "lucide-react"
        assert diagnostics[0].file == "./src/components/Header.tsx"
        # The surrounding "Cannot find module" text is part of the same error
        assert all(d.kind is not DiagnosticKind.MODULE_NOT_FOUND for d in diagnostics)

    def test_duplicate_identifier(self) -> None:
        output = "./src/app/page.tsx\nError:\n  x Identifier 'handleSubmit' has already been declared\n"
        (diagnostic,) = parse_build_output(output)
        assert diagnostic.kind is DiagnosticKind.DUPLICATE_IDENTIFIER
        assert diagnostic.symbol == "handleSubmit"

    def test_swc_defined_multiple_times(self) -> None:
        (diagnostic,) = parse_build_output("  x the name `formatDate` is defined multiple times")
        assert diagnostic.kind is DiagnosticKind.DUPLICATE_IDENTIFIER
        assert diagnostic.symbol == "formatDate"

    def test_duplicate_export(self) -> None:
        (diagnostic,) = parse_build_output("  x the name `Room` is exported multiple times")
        assert diagnostic.kind is DiagnosticKind.DUPLICATE_EXPORT
        assert diagnostic.symbol == "Room"

    def test_cannot_find_name(self) -> None:
        output = "./src/hooks/useRooms.ts:12:3\nType error: Cannot find name 'Booking'.\n"
        (diagnostic,) = parse_build_output(output)
        assert diagnostic.kind is DiagnosticKind.CANNOT_FIND_NAME
        assert diagnostic.symbol == "Booking"
        assert diagnostic.line == 12

    def test_module_not_found(self) -> None:
        (diagnostic,) = parse_build_output("Module not found: Can't resolve '@/components/Nav'")
        assert diagnostic.kind is DiagnosticKind.MODULE_NOT_FOUND
        assert diagnostic.module == "@/components/Nav"

    def test_other_type_error(self) -> None:
        output = "Type error: Property 'colour' does not exist on type 'Room'.\n"
        (diagnostic,) = parse_build_output(output)
        assert diagnostic.kind is DiagnosticKind.TYPE_ERROR
        assert diagnostic.message == "Property 'colour' does not exist on type 'Room'."

    def test_generic_only_when_nothing_else(self) -> None:
        (diagnostic,) = parse_build_output("Failed to compile.\n")
        assert diagnostic.kind is DiagnosticKind.GENERIC
        kinds = {d.kind for d in parse_build_output(MISSING_EXPORT_OUTPUT)}
        assert DiagnosticKind.GENERIC not in kinds

    def test_clean_output(self) -> None:
        assert parse_build_output("Compiled successfully\n") == []

    def test_identical_diagnostics_reported_once(self) -> None:
        output = "Duplicate identifier 'x'.\nDuplicate identifier 'x'.\n"
        assert len(parse_build_output(output)) == 1

    def test_order_follows_output(self) -> None:
        output = "Cannot find name 'A'.\nModule not found: Can't resolve './b'\n"
        kinds = [d.kind for d in parse_build_output(output)]
        assert kinds == [DiagnosticKind.CANNOT_FIND_NAME, DiagnosticKind.MODULE_NOT_FOUND]

    def test_describe(self) -> None:
        (diagnostic,) = parse_build_output(MISSING_EXPORT_OUTPUT)
        assert diagnostic.describe().startswith("[missing-export] ./src/app/rooms/page.tsx:4: ")

    def test_kinds_format_as_their_value(self) -> None:
        assert f"{DiagnosticKind.MISSING_EXPORT}" == "missing-export"
        assert DiagnosticKind("barrel-optimize") is DiagnosticKind.BARREL_OPTIMIZE


def test_group_by_kind() -> None:
    output = "Cannot find name 'A'.\nCannot find name 'B'.\nDuplicate identifier 'c'.\n"
    grouped = group_by_kind(parse_build_output(output))
    assert list(grouped) == [DiagnosticKind.CANNOT_FIND_NAME, DiagnosticKind.DUPLICATE_IDENTIFIER]
    assert [d.symbol for d in grouped[DiagnosticKind.CANNOT_FIND_NAME]] == ["A", "B"]
