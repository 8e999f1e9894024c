import csv

import pytest

from chronokit.ziffy_config import PathInfo, SwitchPrintInfo, SwitchTrafficInfo, TCStatus
from chronokit.ziffy_report import (
    HEADER,
    column_index,
    compute_info,
    host_without_prefix,
    hop_count,
    interface_prefix,
    pretty_print,
    print_rows,
    render_table,
    sorted_switches,
    write_csv,
)


def identity(ip):
    return ip


def sw(ip, hop, cf, route_idx=0):
    return SwitchTrafficInfo(ip=ip, hop=hop, corr_field=cf, route_idx=route_idx)


def two_hop_route():
    return [PathInfo(switches=[sw("a", 1, 0.0), sw("b", 2, 300.0)])]


def test_compute_info_from_source_case():
    switches = [sw(str(i), i, float(i * 100)) for i in range(6)]
    info = compute_info([PathInfo(switches=switches)], 250.0, identity)
    assert len(info) == 6
    for i in range(5):
        entry = info[(str(i), i)]
        assert entry.last is False
        assert entry.avg_cf == pytest.approx(100.0)
        assert entry.tc_enable is TCStatus.OFF
    last = info[("5", 5)]
    assert last.last is True
    assert last.tc_enable is TCStatus.UNKNOWN
    assert last.avg_cf == 0.0


def test_compute_info_aggregates_routes():
    routes = [
        PathInfo(switches=[sw("a", 1, 0.0), sw("c", 2, 100.0)]),
        PathInfo(switches=[sw("a", 1, 0.0), sw("c", 2, 500.0)]),
    ]
    info = compute_info(routes, 250.0, identity)
    a = info[("a", 1)]
    assert a.routes == 2
    assert a.div_routes == 2
    assert a.avg_cf == pytest.approx(300.0)
    assert a.max_cf == 500.0
    assert a.min_cf == 100.0
    assert a.tc_enable is TCStatus.ON
    assert info[("c", 2)].routes == 2


def test_compute_info_non_adjacent_hop_is_last():
    route = PathInfo(switches=[sw("a", 1, 0.0), sw("b", 3, 900.0)])
    info = compute_info([route], 250.0, identity)
    assert info[("a", 1)].last is True
    assert info[("a", 1)].tc_enable is TCStatus.UNKNOWN


def test_compute_info_rack_hostname_and_interface():
    names = {"x": "eth2.rsw001", "y": "eth3.fsw002"}
    route = PathInfo(
        switches=[sw("x", 1, 0.0), sw("y", 2, 50.0)], rack_sw_hostname="rack.example"
    )
    info = compute_info([route], 250.0, names.__getitem__)
    first = info[("rack.example", 1)]
    assert first.interface == "eth2"
    assert first.tc_enable is TCStatus.OFF
    second = info[("fsw002", 2)]
    assert second.interface == "eth3"


def test_host_without_prefix():
    assert host_without_prefix("eth1.localhost") == "localhost"
    assert host_without_prefix("eth1-432.localhost") == "localhost"
    assert host_without_prefix("eth4-4-1.sswyyy.asd.asd.asd.tfbnw.net.") == "sswyyy.asd.asd.asd.tfbnw.net."
    assert host_without_prefix("sswyyy.asd.asd.asd.tfbnw.net.") == "sswyyy.asd.asd.asd.tfbnw.net."
    assert host_without_prefix("2401:face:face::") == "2401:face:face::"
    assert host_without_prefix("1.2.3.4") == "1.2.3.4"
    assert host_without_prefix("eth0.1.2.3.4") == "1.2.3.4"


def test_interface_prefix():
    assert interface_prefix("eth1.localhost") == "eth1"
    assert interface_prefix("eth1-432.localhost") == "eth1-432"
    assert interface_prefix("eth4-4-1.sswyyy.asd.asd.asd.tfbnw.net.") == "eth4-4-1"
    assert interface_prefix("sswyyy.asd.asd.asd.tfbnw.net.") == ""
    assert interface_prefix("2401:face:face::") == ""
    assert interface_prefix("1.2.3.4") == ""
    assert interface_prefix("eth0.1.2.3.4") == "eth0"


@pytest.mark.parametrize("hop, expected", [(1, 2), (2, 3), (3, 1), (4, 4), (5, 0), (-1, 0)])
def test_hop_count(hop, expected):
    hops = [1, 1, 2, 2, 2, 3, 4, 4, 4, 4]
    switches = [SwitchPrintInfo(hop=h) for h in hops]
    assert hop_count(switches, hop) == expected


@pytest.mark.parametrize("name, expected", [("uniq", 0), ("ip_address", 3), ("avg_CF(ns)", 8)])
def test_column_index(name, expected):
    assert column_index(HEADER, name) == expected


@pytest.mark.parametrize("name", ["random_col_name", "TCtypo"])
def test_column_index_missing(name):
    with pytest.raises(ValueError):
        column_index(HEADER, name)


def test_sorted_switches_orders_by_hop():
    info = {
        ("c", 3): SwitchPrintInfo(hostname="c", hop=3),
        ("a", 1): SwitchPrintInfo(hostname="a", hop=1),
        ("b", 2): SwitchPrintInfo(hostname="b", hop=2),
    }
    assert [s.hop for s in sorted_switches(info)] == [1, 2, 3]


def test_print_rows():
    info = compute_info(two_hop_route(), 250.0, identity)
    rows = print_rows(sorted_switches(info))
    assert rows[0] == list(HEADER)
    assert rows[1] == ["1", "1", "1", "a", "", "a", "1", "On", "300.0000", "300.0000", "300.0000"]
    assert rows[2] == ["2", "1", "2", "b", "", "b", "1", "Unknown", "", "", ""]


def test_print_rows_uniq_only_once_per_hostname():
    switches = [
        SwitchPrintInfo(hostname="h", hop=1, last=True),
        SwitchPrintInfo(hostname="h", hop=2, last=True),
    ]
    rows = print_rows(switches)
    assert [r[0] for r in rows[1:]] == ["1", ""]


def test_render_table_inserts_blank_rows_per_hop():
    info = compute_info(two_hop_route(), 250.0, identity)
    text = render_table(print_rows(sorted_switches(info)))
    assert "ip_address" in text
    assert "Unknown" in text
    blank_lines = [
        line for line in text.splitlines() if line.startswith("|") and set(line) <= {"|", " "}
    ]
    assert len(blank_lines) == 2


def test_render_table_requires_hop_column():
    with pytest.raises(ValueError):
        render_table([["a", "b"], ["1", "2"]])


def test_pretty_print(capsys):
    pretty_print(two_hop_route(), 250.0, identity)
    out = capsys.readouterr().out
    assert "300.0000" in out
    assert "On" in out


def test_write_csv(tmp_path):
    path = tmp_path / "out.csv"
    write_csv(two_hop_route(), path, 250.0, identity)
    with open(path, newline="", encoding="utf-8") as handle:
        rows = list(csv.reader(handle))
    assert rows[0] == list(HEADER)
    assert rows[1][3] == "a"
    assert rows[1][7] == "On"
    assert rows[2][7] == "Unknown"
    assert len(rows) == 3