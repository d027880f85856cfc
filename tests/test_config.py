import io
import ipaddress

import pytest

from pdclient.config import (
    Config,
    IaConf,
    IfaceConf,
    PdConf,
    changed_ifaces,
    format_config,
    print_config,
)
from pdclient.protocol import MAX_IA


def _sample_config(rapid_commit=True):
    iface = IfaceConf("em0")
    ia = iface.add_ia(48)
    ia.pds.append(PdConf("em1", 64, "0:0:0:1::"))
    ia.pds.append(PdConf("reserve", 64))
    return Config(rapid_commit=rapid_commit, ifaces=[iface])


def test_add_ia_assigns_sequential_ids():
    iface = IfaceConf("em0")
    ids = [iface.add_ia(56).id for _ in range(3)]
    assert ids == [0, 1, 2]
    assert iface.ia_count == 3


def test_add_ia_limit():
    iface = IfaceConf("em0")
    for _ in range(MAX_IA):
        iface.add_ia(64)
    with pytest.raises(ValueError, match="Too many prefix delegation requests"):
        iface.add_ia(64)
    assert iface.ia_count == MAX_IA


def test_pdconf_mask_converted():
    pd = PdConf("em1", 64, "0:0:0:1::")
    assert pd.prefix_mask == ipaddress.IPv6Address("0:0:0:1::")


def test_find_iface():
    conf = _sample_config()
    assert conf.find_iface("em0") is conf.ifaces[0]
    assert conf.find_iface("em9") is None
    assert conf.find_iface(None) is None


def test_merge_takes_other():
    conf = Config()
    other = _sample_config()
    conf.merge(other)
    assert conf.rapid_commit is True
    assert [i.name for i in conf.ifaces] == ["em0"]


def test_changed_ifaces_added_and_removed():
    indexes = {"em0": 1, "em1": 2, "em2": 3}
    old = Config(ifaces=[IfaceConf("em0"), IfaceConf("em1")])
    new = Config(ifaces=[IfaceConf("em1"), IfaceConf("em2")])
    result = changed_ifaces(old, new, lambda n: indexes.get(n, 0))
    assert result == [3, 1]


def test_changed_ifaces_skips_unknown_names():
    old = Config(ifaces=[IfaceConf("gone")])
    new = Config(ifaces=[IfaceConf("missing")])
    assert changed_ifaces(old, new, lambda n: 0) == []


def test_changed_ifaces_same_config_is_empty():
    conf = _sample_config()
    assert changed_ifaces(conf, _sample_config(), lambda n: 7) == []


def test_format_config_plain():
    text = format_config(_sample_config(), 0)
    assert text == (
        "request rapid commit\n\n"
        "request prefix delegation on em0 for {\n"
        "\tem1/64\n"
        "\treserve/64\n"
        "}\n"
    )


def test_format_config_verbose():
    text = format_config(_sample_config(rapid_commit=False), 2)
    assert text.startswith(
        "request prefix delegation on em0 for {\t# prefix length = 48\n")
    assert "\tem1/64\t# 2001:db8:0:1::/64\n" in text
    assert "\treserve/64\t# 2001:db8::/64\n" in text
    assert not text.startswith("request rapid commit")


def test_short_ia_prefix_suppresses_pd_detail():
    iface = IfaceConf("em0")
    ia = iface.add_ia(16)
    ia.pds.append(PdConf("em1", 64))
    text = format_config(Config(ifaces=[iface]), 2)
    assert "\tem1/64\n" in text
    assert "# 2001:db8" not in text


def test_multiple_ias_separated_by_blank_line():
    iface = IfaceConf("em0")
    iface.add_ia(48)
    iface.add_ia(56)
    text = format_config(Config(ifaces=[iface]), 0)
    block = "request prefix delegation on em0 for {\n}\n"
    assert text == block + "\n" + block


def test_print_config_writes_formatted_text():
    conf = _sample_config()
    out = io.StringIO()
    print_config(conf, 1, out)
    assert out.getvalue() == format_config(conf, 1)


def test_print_config_defaults_to_stdout(capsys):
    conf = _sample_config()
    print_config(conf, 0)
    assert capsys.readouterr().out == format_config(conf, 0)


def test_empty_config_formats_to_nothing():
    assert format_config(Config(), 2) == ""


def test_iaconf_defaults():
    ia = IaConf(id=0, prefix_len=64)
    assert ia.pds == []
    assert ia.prefix_len == 64