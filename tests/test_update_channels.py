import pytest

from tacd.update_channels import (
    ONE_DAY,
    ONE_HOUR,
    ONE_MINUTE,
    Channel,
    ChannelError,
    UpstreamBundle,
    parse_polling_interval,
)

OLDER = "4.0-0-20230222110225"
NEWER = "4.0-0-20230222111713"
LATEST = "4.0-0-20230428214619"

SLOTS = {
    "rootfs_0": {"bundle_version": NEWER, "state": "booted"},
    "rootfs_1": {"bundle_version": OLDER, "state": "inactive"},
}


def write_channel(directory, file_name, name, interval=None, url="https://example.com/b.raucb"):
    lines = [
        f"name: {name}",
        f"display_name: {name.title()}",
        "description: A channel",
        f'url: "  {url}  "',
    ]
    if interval is not None:
        lines.append(f"polling_interval: {interval}")
    path = directory / file_name
    path.write_text("\n".join(lines) + "\n")
    return path


@pytest.fixture
def enable_dir(tmp_path):
    d = tmp_path / "enabled"
    d.mkdir()
    return d


def test_parse_interval_units():
    assert parse_polling_interval("1m") == ONE_MINUTE
    assert parse_polling_interval("3h") == 3 * ONE_HOUR
    assert parse_polling_interval("+2d") == 2 * ONE_DAY


def test_parse_interval_zero_and_none():
    assert parse_polling_interval("0h") is None
    assert parse_polling_interval(None) is None


@pytest.mark.parametrize("value", ["5", "", "5s", "m", "-1m", "1.5h", " 1h", "99999999999d"])
def test_parse_interval_errors(value):
    with pytest.raises(ChannelError):
        parse_polling_interval(value, "x.yaml")


def test_suffix_error_names_file():
    with pytest.raises(ChannelError, match="x.yaml"):
        parse_polling_interval("12", "x.yaml")


def test_from_file(tmp_path, enable_dir):
    path = write_channel(tmp_path, "01_stable.yaml", "stable", "24h")
    ch = Channel.from_file(path, str(enable_dir))
    assert ch.name == "stable"
    assert ch.url == "https://example.com/b.raucb"
    assert ch.polling_interval == 24 * ONE_HOUR
    assert ch.enabled is False
    assert ch.bundle is None


def test_from_file_enabled_by_certificate(tmp_path, enable_dir):
    (enable_dir / "stable.cert.pem").write_text("cert")
    path = write_channel(tmp_path, "01_stable.yaml", "stable")
    ch = Channel.from_file(path, str(enable_dir))
    assert ch.enabled is True
    assert ch.polling_interval is None


def test_from_file_missing_field(tmp_path, enable_dir):
    path = tmp_path / "bad.yaml"
    path.write_text("name: x\ndisplay_name: X\n")
    with pytest.raises(ChannelError, match="description"):
        Channel.from_file(path, str(enable_dir))


def test_from_file_bad_interval(tmp_path, enable_dir):
    path = write_channel(tmp_path, "bad.yaml", "bad", "10s")
    with pytest.raises(ChannelError, match="bad.yaml"):
        Channel.from_file(path, str(enable_dir))


def test_from_directory_sorted_and_filtered(tmp_path, enable_dir):
    write_channel(tmp_path, "05_testing.yaml", "testing")
    write_channel(tmp_path, "01_stable.yaml", "stable")
    (tmp_path / "notes.txt").write_text("ignored")
    (tmp_path / "enabled.yml").write_text("ignored")
    channels = Channel.from_directory(tmp_path, str(enable_dir))
    assert [ch.name for ch in channels] == ["stable", "testing"]


def test_from_directory_duplicate(tmp_path, enable_dir):
    write_channel(tmp_path, "01_a.yaml", "same")
    write_channel(tmp_path, "02_b.yaml", "same")
    with pytest.raises(ChannelError, match="duplicate"):
        Channel.from_directory(tmp_path, str(enable_dir))


def test_from_directory_missing():
    with pytest.raises(FileNotFoundError):
        Channel.from_directory("/nonexistent/channels/dir")


def test_poll_disabled_clears_bundle(tmp_path, enable_dir):
    ch = Channel.from_file(write_channel(tmp_path, "a.yaml", "stable"), str(enable_dir))
    ch.bundle = UpstreamBundle("c", LATEST, True)
    calls = []
    ch.poll(lambda url: calls.append(url) or ("c", LATEST), SLOTS, str(enable_dir))
    assert ch.bundle is None
    assert calls == []


def test_poll_enabled_fetches_bundle(tmp_path, enable_dir):
    ch = Channel.from_file(write_channel(tmp_path, "a.yaml", "stable"), str(enable_dir))
    (enable_dir / "stable.cert.pem").write_text("cert")
    seen = []

    def info(url):
        seen.append(url)
        return ("LXA TAC", LATEST)

    ch.poll(info, SLOTS, str(enable_dir))
    assert seen == [ch.url]
    assert ch.enabled is True
    assert ch.bundle == UpstreamBundle("LXA TAC", LATEST, True)


def test_poll_error_propagates(tmp_path, enable_dir):
    (enable_dir / "stable.cert.pem").write_text("cert")
    ch = Channel.from_file(write_channel(tmp_path, "a.yaml", "stable"), str(enable_dir))

    def info(url):
        raise ConnectionError("down")

    with pytest.raises(ConnectionError):
        ch.poll(info, None, str(enable_dir))
    assert ch.bundle is None


def test_bundle_newer_than_both():
    assert UpstreamBundle.create("c", LATEST, SLOTS).newer_than_installed is True


def test_bundle_not_newer_than_one_slot():
    assert UpstreamBundle.create("c", NEWER, SLOTS).newer_than_installed is False
    assert UpstreamBundle.create("c", OLDER, SLOTS).newer_than_installed is False


def test_bundle_without_slot_status_not_rated():
    assert UpstreamBundle.create("c", LATEST, None).newer_than_installed is False


def test_bundle_missing_or_uncomparable_versions_count_as_older():
    slots = {"rootfs_0": {"state": "booted"}, "rootfs_1": {"bundle_version": "nodash"}}
    assert UpstreamBundle.create("c", OLDER, slots).newer_than_installed is True
    assert UpstreamBundle.create("c", OLDER, {}).newer_than_installed is True


def test_update_install_can_reset():
    bundle = UpstreamBundle("c", NEWER, True)
    bundle.update_install(SLOTS)
    assert bundle.newer_than_installed is False


def test_to_dict(tmp_path, enable_dir):
    ch = Channel.from_file(write_channel(tmp_path, "a.yaml", "stable", "1m"), str(enable_dir))
    ch.bundle = UpstreamBundle("c", LATEST, True)
    d = ch.to_dict()
    assert d["polling_interval"] == {"secs": ONE_MINUTE, "nanos": 0}
    assert d["bundle"] == {"compatible": "c", "version": LATEST, "newer_than_installed": True}
    assert d["name"] == "stable"
    assert d["enabled"] is False


def test_to_dict_without_interval_or_bundle(tmp_path, enable_dir):
    ch = Channel.from_file(write_channel(tmp_path, "a.yaml", "stable"), str(enable_dir))
    d = ch.to_dict()
    assert d["polling_interval"] is None
    assert d["bundle"] is None


def test_channel_equality_tracks_bundle(tmp_path, enable_dir):
    path = write_channel(tmp_path, "a.yaml", "stable")
    a = Channel.from_file(path, str(enable_dir))
    b = Channel.from_file(path, str(enable_dir))
    assert a == b
    b.bundle = UpstreamBundle("c", LATEST)
    assert not a == b