from refscan.grouping import group_by_file, sort_groups_by_active
from refscan.models import FileGroup, MatchHit


def _hit(path: str, line: int, column: int = 0) -> MatchHit:
    return MatchHit(path=path, line=line, column=column, length=1, preview="x")


def test_group_by_file_orders_hits_and_labels_relative(tmp_path):
    a = str(tmp_path / "src" / "a.ts")
    b = str(tmp_path / "b.ts")
    groups = group_by_file([_hit(a, 5), _hit(b, 1), _hit(a, 2, 4), _hit(a, 2, 1)], tmp_path)

    assert [g.label for g in groups] == ["src/a.ts", "b.ts"]
    assert [(h.line, h.column) for h in groups[0].hits] == [(2, 1), (2, 4), (5, 0)]


def test_sort_groups_active_first_then_same_directory_then_label():
    active = "/repo/src/dir/file.ts"
    groups = [
        FileGroup(path="/repo/src/aaa.ts", label="aaa.ts"),
        FileGroup(path="/repo/src/dir/bbb.ts", label="bbb.ts"),
        FileGroup(path="/repo/src/dir/file.ts", label="file.ts"),
        FileGroup(path="/repo/zzz.ts", label="zzz.ts"),
        FileGroup(path="/repo/src/ccc.ts", label="ccc.ts"),
    ]

    ordered = sort_groups_by_active(groups, active)

    assert [g.label for g in ordered] == ["file.ts", "bbb.ts", "aaa.ts", "ccc.ts", "zzz.ts"]


def test_sort_groups_alphabetical_without_active():
    groups = [
        FileGroup(path="/a/z.ts", label="z.ts"),
        FileGroup(path="/a/a.ts", label="a.ts"),
        FileGroup(path="/a/m.ts", label="m.ts"),
    ]

    assert [g.label for g in sort_groups_by_active(groups)] == ["a.ts", "m.ts", "z.ts"]
