"""Tests for command-line parsing."""

import pytest

from vidprep.__main__ import parse_args


def test_defaults():
    args = parse_args([])
    assert args.video is None
    assert args.config is None
    assert args.log_level == "INFO"


def test_video_and_options():
    args = parse_args(["clip.mp4", "--config", "/tmp/cfg.txt", "--log-level", "DEBUG"])
    assert (args.video, args.config, args.log_level) == ("clip.mp4", "/tmp/cfg.txt", "DEBUG")


def test_rejects_unknown_log_level():
    with pytest.raises(SystemExit):
        parse_args(["--log-level", "LOUD"])
