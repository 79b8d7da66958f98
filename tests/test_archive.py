"""Tests for the HAR archive model and serialization."""

import json

import pytest

from httprecorder.errors import MalformedArchiveError
from httprecorder.modules.archive import (
    HarCreator,
    HttpArchive,
    append_entries,
    append_entries_slow,
    archive_to_messages,
    can_splice,
    dumps_archive,
    interaction_to_archive,
    loads_archive,
    message_to_entry,
)
from httprecorder.modules.interaction import Interaction

# ── Projection ───────────────────────────────────────────────────


class TestInteractionToArchive:
    def test_one_entry_per_message(self, interaction):
        archive = interaction_to_archive(interaction)
        assert len(archive.entries) == 2
        assert archive.log.version == "1.2"
        assert archive.log.creator.name == "httprecorder"

    def test_custom_creator(self, interaction):
        archive = interaction_to_archive(interaction, HarCreator("suite", "9.9"))
        assert archive.to_dict()["log"]["creator"] == {"name": "suite", "version": "9.9"}

    def test_query_string_decomposed(self, message):
        entry = message_to_entry(message)
        assert [(q.name, q.value) for q in entry.request.query_string] == [("page", "1")]

    def test_form_params_decomposed(self, interaction):
        entry = message_to_entry(interaction.messages[1])
        post_data = entry.request.post_data
        assert post_data is not None
        assert post_data.mime_type == "application/x-www-form-urlencoded"
        assert [(p.name, p.value) for p in post_data.params] == [
            ("user", "alice"),
            ("password", "secret123"),
        ]

    def test_redirect_url_from_location(self, interaction):
        entry = message_to_entry(interaction.messages[1])
        assert entry.response.redirect_url == "/me"

    def test_time_in_milliseconds(self, message):
        entry = message_to_entry(message)
        assert entry.time == 12.5
        assert entry.timings.wait == 12.5

    def test_no_post_data_without_body(self, message):
        data = message_to_entry(message).to_dict()
        assert "postData" not in data["request"]


class TestRoundTrip:
    def test_dict_round_trip(self, interaction):
        archive = interaction_to_archive(interaction)
        data = archive.to_dict()
        assert HttpArchive.from_dict(data).to_dict() == data

    def test_messages_round_trip(self, interaction):
        messages = archive_to_messages(interaction_to_archive(interaction))
        for original, restored in zip(interaction.messages, messages, strict=True):
            assert restored.request.method == original.request.method
            assert restored.request.url == original.request.url
            assert restored.request.headers == original.request.headers
            assert restored.request.body == original.request.body
            assert restored.response.status_code == original.response.status_code
            assert restored.response.headers == original.response.headers
            assert restored.response.body == original.response.body
            assert restored.timings.started_at == original.timings.started_at

    def test_binary_body_uses_base64(self, make_message):
        body = bytes(range(256))
        message = make_message(
            method="PUT", request_body=body, response_body=b"\xff\xfe\x00binary"
        )
        archive = interaction_to_archive(Interaction("bin", [message]))
        data = archive.to_dict()["log"]["entries"][0]
        assert data["request"]["postData"]["_encoding"] == "base64"
        assert data["response"]["content"]["encoding"] == "base64"

        restored = archive_to_messages(loads_archive(dumps_archive(archive)))[0]
        assert restored.request.body == body
        assert restored.response.body == b"\xff\xfe\x00binary"

    def test_empty_response_body_omits_text(self, make_message):
        message = make_message(status_code=204, response_body=b"")
        content = message_to_entry(message).to_dict()["response"]["content"]
        assert "text" not in content
        assert content["size"] == 0


# ── Validation ───────────────────────────────────────────────────


class TestMalformedArchives:
    def _valid(self, interaction) -> dict:
        return interaction_to_archive(interaction).to_dict()

    def test_invalid_json(self):
        with pytest.raises(MalformedArchiveError, match="not valid JSON"):
            loads_archive("{not json")

    def test_unsupported_version(self, interaction):
        data = self._valid(interaction)
        data["log"]["version"] = "2.0"
        with pytest.raises(MalformedArchiveError, match="unsupported HAR version"):
            HttpArchive.from_dict(data)

    def test_version_1_1_accepted(self, interaction):
        data = self._valid(interaction)
        data["log"]["version"] = "1.1"
        assert HttpArchive.from_dict(data).log.version == "1.1"

    def test_missing_log(self):
        with pytest.raises(MalformedArchiveError, match="'log'"):
            HttpArchive.from_dict({})

    def test_missing_request_field(self, interaction):
        data = self._valid(interaction)
        del data["log"]["entries"][0]["request"]["method"]
        with pytest.raises(MalformedArchiveError, match="'method'"):
            HttpArchive.from_dict(data)

    def test_wrong_type(self, interaction):
        data = self._valid(interaction)
        data["log"]["entries"][0]["response"]["status"] = "200"
        with pytest.raises(MalformedArchiveError, match="status"):
            HttpArchive.from_dict(data)

    def test_bool_is_not_a_number(self, interaction):
        data = self._valid(interaction)
        data["log"]["entries"][0]["time"] = True
        with pytest.raises(MalformedArchiveError):
            HttpArchive.from_dict(data)

    def test_invalid_base64_body(self, interaction):
        data = self._valid(interaction)
        content = data["log"]["entries"][0]["response"]["content"]
        content["text"] = "%%%"
        content["encoding"] = "base64"
        with pytest.raises(MalformedArchiveError, match="base64"):
            archive_to_messages(HttpArchive.from_dict(data))


# ── Append ───────────────────────────────────────────────────────


class TestAppendEntries:
    def test_splice_matches_slow_path_byte_for_byte(self, interaction, make_message):
        existing = dumps_archive(interaction_to_archive(interaction))
        new_entries = interaction_to_archive(
            Interaction("more", [make_message(url="https://api.example.com/ünïcode")])
        ).entries

        assert can_splice(existing)
        assert append_entries(existing, new_entries) == append_entries_slow(existing, new_entries)

    def test_repeated_splices_stay_equal(self, message, make_message):
        fast = slow = dumps_archive(interaction_to_archive(Interaction("x", [message])))
        for i in range(3):
            entries = [message_to_entry(make_message(url=f"https://h/{i}"))]
            fast = append_entries(fast, entries)
            slow = append_entries_slow(slow, entries)
        assert fast == slow
        assert len(loads_archive(fast).entries) == 4

    def test_empty_archive_falls_back(self, message):
        existing = dumps_archive(HttpArchive())
        assert not can_splice(existing)
        result = append_entries(existing, [message_to_entry(message)])
        assert len(loads_archive(result).entries) == 1

    def test_foreign_layout_falls_back(self, interaction, message):
        compact = json.dumps(interaction_to_archive(interaction).to_dict())
        assert not can_splice(compact)
        result = append_entries(compact, [message_to_entry(message)])
        assert len(loads_archive(result).entries) == 3
        assert result == dumps_archive(loads_archive(result))

    def test_no_entries_is_identity(self, interaction):
        existing = dumps_archive(interaction_to_archive(interaction))
        assert append_entries(existing, []) == existing
