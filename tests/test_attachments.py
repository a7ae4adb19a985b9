"""Attachment classifier tests."""
from dataclasses import dataclass

import pytest

from sos_relay.models.report import AttachmentKind, ReportMode
from sos_relay.pipelines.attachments import classify, classify_attachments, derive_mode


@dataclass
class Descriptor:
    content_type: str
    url: str


@pytest.mark.parametrize("content_type,expected", [
    ("audio/mpeg", AttachmentKind.AUDIO),
    ("audio/webm;codecs=opus", AttachmentKind.AUDIO),
    ("video/mp4", AttachmentKind.VIDEO),
    (" Video/WebM ", AttachmentKind.VIDEO),
    ("image/png", None),
    ("application/octet-stream", None),
    ("", None),
    (None, None),
])
def test_classify(content_type, expected):
    assert classify(content_type) == expected


def test_no_files_selects_nothing():
    selection = classify_attachments([])
    assert selection.audio is None
    assert selection.video is None
    assert selection.items() == []


def test_one_of_each():
    audio = Descriptor("audio/ogg", "a")
    video = Descriptor("video/mp4", "v")
    selection = classify_attachments([video, audio])
    assert selection.audio is audio
    assert selection.video is video


def test_last_file_of_same_kind_wins():
    first = Descriptor("audio/mpeg", "first")
    second = Descriptor("audio/wav", "second")
    third = Descriptor("audio/ogg", "third")
    selection = classify_attachments([first, Descriptor("image/jpeg", "img"), second, third])
    assert selection.audio.url == "third"
    assert selection.video is None


def test_ignored_types_do_not_fill_slots():
    selection = classify_attachments([Descriptor("image/jpeg", "img"), Descriptor("text/plain", "txt")])
    assert selection.items() == []


def test_descriptor_without_content_type_is_ignored():
    assert classify_attachments([object()]).items() == []


class TestDeriveMode:

    def test_video_wins_over_audio(self):
        assert derive_mode(has_video=True, has_audio=True) == ReportMode.VIDEO

    def test_audio_only(self):
        assert derive_mode(has_video=False, has_audio=True) == ReportMode.AUDIO

    def test_form_when_no_media(self):
        assert derive_mode(has_video=False, has_audio=False) == ReportMode.FORM
