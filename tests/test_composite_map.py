"""Tests for the in-memory composite map."""

from pathlib import Path
from typing import List

import pytest

from tera_mod_manager.composite import CompositeMap, MapEntry, MatchKind, cipher
from tera_mod_manager.errors import EntryNotFound, ModManagerError

from conftest import build_map


class TestLoadSave:
    """Maps survive a trip through the encrypted file."""

    def test_save_then_load(self, tmp_path: Path, clean_entries: List[MapEntry]) -> None:
        path = tmp_path / "CompositePackageMapper.dat"
        build_map(clean_entries).save(path)

        loaded = CompositeMap.from_file(path)
        assert loaded.source_path == path
        assert not loaded.dirty
        assert not loaded.truncated
        assert loaded.source_size == path.stat().st_size
        assert sorted(loaded, key=lambda e: e.entry_id) == sorted(
            clean_entries, key=lambda e: e.entry_id
        )

    def test_file_is_encrypted(self, tmp_path: Path) -> None:
        path = tmp_path / "map.dat"
        build_map([MapEntry("a", "P.A", "1", 0, 5)]).save(path)

        raw = path.read_bytes()
        assert b"P.A" not in raw
        assert cipher.decrypt(raw) == b"a?P.A,1,0,5,|!"

    def test_from_bytes(self) -> None:
        mapper = CompositeMap.from_bytes(cipher.encrypt(b"a?P.A,1,0,5,|P.B,2,"))
        assert mapper.truncated
        assert mapper.source_path is None
        assert len(mapper) == 0

    def test_load_keeps_source_path(self, tmp_path: Path) -> None:
        """Refilling a map from another file still saves to its own file."""
        own = tmp_path / "own.dat"
        other = tmp_path / "other.dat"
        build_map([MapEntry("a", "P.A", "1", 0, 5)]).save(own)
        build_map([MapEntry("b", "P.B", "2", 0, 5)]).save(other)

        mapper = CompositeMap.from_file(own)
        mapper.load(other)
        assert mapper.source_path == own
        assert "2" in mapper

    def test_save_without_path(self) -> None:
        with pytest.raises(ValueError):
            CompositeMap().save()

    def test_save_clears_dirty(self, tmp_path: Path) -> None:
        mapper = build_map([MapEntry("a", "P.A", "1", 0, 5)])
        mapper.apply_patch("1", "b", 1, 1)
        assert mapper.dirty

        mapper.save(tmp_path / "map.dat")
        assert not mapper.dirty

    def test_failed_save_keeps_old_file(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """A failing replace leaves the target and no temp files behind."""
        path = tmp_path / "map.dat"
        build_map([MapEntry("a", "P.A", "1", 0, 5)]).save(path)
        before = path.read_bytes()

        def fail_replace(src: object, dst: object) -> None:
            raise OSError("disk full")

        monkeypatch.setattr("tera_mod_manager.utils.fileio.os.replace", fail_replace)

        mapper = build_map([MapEntry("b", "P.B", "2", 0, 5)])
        mapper.dirty = True
        with pytest.raises(OSError):
            mapper.save(path)

        assert path.read_bytes() == before
        assert mapper.dirty
        assert [p.name for p in tmp_path.iterdir()] == ["map.dat"]


class TestLookup:
    """Fuzzy lookups distinguish unique, missing and ambiguous."""

    def test_unique(self, clean_entries: List[MapEntry]) -> None:
        mapper = build_map(clean_entries)
        result = mapper.match_incomplete_path("sword")

        assert result.kind is MatchKind.UNIQUE
        assert result.entry is not None
        assert result.entry.entry_id == "c1.sword"
        assert mapper.find_by_incomplete_path("mods/Elin_Body").entry_id == "c2.body"

    def test_none(self, clean_entries: List[MapEntry]) -> None:
        mapper = build_map(clean_entries)
        result = mapper.match_incomplete_path("Shield")

        assert result.kind is MatchKind.NONE
        assert result.entry is None
        assert mapper.find_by_incomplete_path("Shield") is None

    def test_ambiguous(self) -> None:
        """Two entries normalizing to the same name never resolve."""
        mapper = build_map(
            [
                MapEntry("a", "PkgA.Sword", "1", 0, 5),
                MapEntry("b", "PkgB.Group.Sword_C", "2", 0, 5),
            ]
        )
        result = mapper.match_incomplete_path("sword")

        assert result.kind is MatchKind.AMBIGUOUS
        assert len(result.candidates) == 2
        assert mapper.find_by_incomplete_path("sword") is None

    def test_container_names(self, clean_entries: List[MapEntry]) -> None:
        mapper = build_map(clean_entries + [MapEntry("", "Lost", "lost", 0, 0)])
        assert mapper.container_names() == ["S1_Weapons_C", "S1_Elin_PC", "S1_Armor"]

    def test_get_entry(self, clean_entries: List[MapEntry]) -> None:
        mapper = build_map(clean_entries)
        assert mapper.get_entry("c3.helm").object_path == "Armor.Set.Helm"
        assert mapper.get_entry("nope") is None


class TestMutation:
    def test_apply_patch(self, clean_entries: List[MapEntry]) -> None:
        mapper = build_map(clean_entries)
        entry = mapper.apply_patch("c1.sword", "MyMod", 12, 34)

        assert (entry.container_file, entry.offset, entry.size) == ("MyMod", 12, 34)
        assert entry.object_path == "S1Weapons.Sword.Sword_C"
        assert mapper.dirty

    def test_apply_patch_missing(self, clean_entries: List[MapEntry]) -> None:
        mapper = build_map(clean_entries)
        with pytest.raises(EntryNotFound) as excinfo:
            mapper.apply_patch("missing", "MyMod", 0, 0)

        assert excinfo.value.entry_id == "missing"
        assert isinstance(excinfo.value, KeyError)
        assert isinstance(excinfo.value, ModManagerError)
        assert not mapper.dirty

    def test_remove_entry(self, clean_entries: List[MapEntry]) -> None:
        mapper = build_map(clean_entries)
        assert mapper.remove_entry("c3.helm")
        assert "c3.helm" not in mapper
        assert mapper.dirty
        assert not mapper.remove_entry("c3.helm")

    def test_reset_from_copies(self, clean_entries: List[MapEntry]) -> None:
        """Entries taken from another map are independent copies."""
        backup = build_map(clean_entries)
        active = CompositeMap()
        active.reset_from(backup)

        assert active.dirty
        active.apply_patch("c1.sword", "MyMod", 1, 1)
        assert backup.get_entry("c1.sword").container_file == "S1_Weapons_C"
