"""Tests for section header decoding and the section header table."""

import pytest

from reindeer.core.errors import BufferOutOfBounds, ZeroCopyError
from reindeer.core.header import ElfHeader
from reindeer.core.range import U64_MAX, ByteRange
from reindeer.core.section import ElfSectionHeader, ElfSectionHeaders
from reindeer.core.strtab import ElfStringTable

from tests.builders import elf_header, section_header


@pytest.fixture
def header64():
    return ElfHeader.parse(elf_header(64))


@pytest.fixture
def header32():
    return ElfHeader.parse(elf_header(32))


class TestElfSectionHeader:
    def test_elf64_fields(self, header64):
        section = ElfSectionHeader.parse(
            header64,
            section_header(
                64,
                name=27,
                type=1,
                flags=0x6,
                addr=0x401000,
                offset=0x1000,
                size=0x1_0000_0000,
                link=3,
                info=4,
                addralign=16,
                entsize=24,
            ),
        )
        assert section.sh_name == 27
        assert section.sh_type == 1
        assert section.sh_flags == 0x6
        assert section.sh_addr == 0x401000
        assert section.sh_offset == 0x1000
        assert section.sh_size == 0x1_0000_0000
        assert section.sh_link == 3
        assert section.sh_info == 4
        assert section.sh_addralign == 16
        assert section.sh_entsize == 24
        assert section.type_name == "PROGBITS"
        assert section.flags_str == "AX"
        assert len(section.view) == 64

    def test_elf32_fields(self, header32):
        section = ElfSectionHeader.parse(
            header32,
            section_header(32, name=1, type=3, offset=0xFFFF_FFF0, size=0x20),
        )
        assert section.sh_offset == 0xFFFF_FFF0
        assert section.type_name == "STRTAB"
        assert section.location() == ByteRange(0xFFFF_FFF0, 0x1_0000_0010)
        assert len(section.view) == 40

    @pytest.mark.parametrize("bits", [32, 64])
    def test_optional_fields(self, bits):
        header = ElfHeader.parse(elf_header(bits))
        section = ElfSectionHeader.parse(header, section_header(bits))
        assert section.sh_addr is None
        assert section.sh_entsize is None
        assert section.sh_offset == 0
        assert section.flags_str == "-"

    def test_short_buffer(self, header64):
        with pytest.raises(ZeroCopyError):
            ElfSectionHeader.parse(header64, section_header(64)[:63])

    def test_location_saturates(self, header64):
        section = ElfSectionHeader.parse(
            header64, section_header(64, offset=U64_MAX - 1, size=U64_MAX)
        )
        assert section.location() == ByteRange(U64_MAX - 1, U64_MAX)

    def test_unknown_type(self, header64):
        section = ElfSectionHeader.parse(header64, section_header(64, type=0x60000001))
        assert section.type_name == "0x60000001"

    def test_gnu_types(self, header64):
        names = [
            ElfSectionHeader.parse(header64, section_header(64, type=t)).type_name
            for t in (0x6FFFFFF6, 0x6FFFFFFE, 0x6FFFFFFF)
        ]
        assert names == ["GNU_HASH", "VERNEED", "VERSYM"]


def _table(bits=64, count=3, shoff=None, entries=None):
    header_bytes = elf_header(bits)
    shoff = len(header_bytes) if shoff is None else shoff
    data = bytearray(
        elf_header(bits, e_shoff=shoff, e_shnum=count)
    )
    data += b"\x00" * (shoff - len(data))
    for entry in entries if entries is not None else [
        section_header(bits, name=i, type=1, offset=i * 0x10) for i in range(count)
    ]:
        data += entry
    data = bytes(data)
    return ElfHeader.parse(data), data


class TestElfSectionHeaders:
    def test_len_and_iteration(self):
        header, data = _table(count=3)
        table = ElfSectionHeaders(header, data)
        assert len(table) == 3
        assert [s.sh_name for s in table] == [0, 1, 2]

    def test_iteration_is_restartable(self):
        header, data = _table(bits=32, count=2)
        table = ElfSectionHeaders(header, data)
        first = [s.sh_offset for s in table]
        second = [s.sh_offset for s in table]
        assert first == second == [0, 0x10]

    def test_get_and_getitem(self):
        header, data = _table(count=2)
        table = ElfSectionHeaders(header, data)
        assert table.get(1).sh_name == 1
        assert table.get(2) is None
        assert table[0].sh_name == 0
        with pytest.raises(IndexError):
            table[2]

    def test_no_table(self):
        data = elf_header(64)
        table = ElfSectionHeaders(ElfHeader.parse(data), data)
        assert len(table) == 0
        assert list(table) == []

    def test_table_past_end_of_buffer(self):
        header, data = _table(count=3)
        table = ElfSectionHeaders(header, data[:-1])
        assert table.get(1) is not None
        with pytest.raises(BufferOutOfBounds):
            table.get(2)
        with pytest.raises(BufferOutOfBounds):
            list(table)

    def test_find_by_name(self):
        strtab = ElfStringTable.parse(b"\x00.text\x00.data\x00")
        entries = [
            section_header(64),
            section_header(64, name=1, type=1),
            section_header(64, name=7, type=1, size=8),
            section_header(64, name=99, type=1),
        ]
        header, data = _table(count=4, entries=entries)
        table = ElfSectionHeaders(header, data)
        found = table.find_by_name(strtab, ".data")
        assert found is not None and found.sh_size == 8
        assert table.find_by_name(strtab, ".bss") is None
