from multiport.ports import parse_port, parse_port_list, parse_positional_ports, unique_ports


def test_parse_port_trims_whitespace():
    assert parse_port(" 3001 ") == 3001


def test_parse_port_rejects_garbage_and_range():
    assert parse_port("abc") is None
    assert parse_port("") is None
    assert parse_port("0") is None
    assert parse_port("70000") is None
    assert parse_port(None) is None


def test_parse_port_list_drops_invalid_entries():
    assert parse_port_list("3000, 3001,x,,3002") == [3000, 3001, 3002]
    assert parse_port_list("nope") == []


def test_positional_ports_skip_flags_and_words():
    assert parse_positional_ports(["3000", "--default", "foo", "3001"]) == [3000, 3001]


def test_unique_ports_keeps_first_occurrence(caplog):
    assert unique_ports([3001, 3000, 3001]) == [3001, 3000]
    assert "more than once" in caplog.text
