# Copyright (C) 2026 Alex Stoyanov
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License along with this program.
# If not, see <https://www.gnu.org/licenses/>.

import datetime
import unittest

from sealmail.formats.envelope_codec import build, extract
from sealmail.formats.envelope_types import METADATA_OPEN, PAYLOAD_CLOSE, PAYLOAD_OPEN
from sealmail.formats.schemes import (
    KNOWN_BANNERS,
    LOCK_EMOJI,
    SCHEMES,
    decorate_subject,
    get_scheme,
    scheme_metadata,
    seal_message,
)
from tests.test_support import TEST_PAYLOAD

NOW = datetime.datetime(2026, 1, 2, 3, 4, 5, 678000, tzinfo=datetime.timezone.utc)


class TestSchemes(unittest.TestCase):
    def test_get_scheme(self) -> None:
        self.assertIs(get_scheme("QKD"), SCHEMES["qkd"])
        self.assertIs(get_scheme(" aes "), SCHEMES["aes"])
        with self.assertRaises(ValueError):
            get_scheme("rsa")

    def test_aes_metadata(self) -> None:
        self.assertEqual(
            scheme_metadata(SCHEMES["aes"], now=NOW),
            {"Encryption": "AES-256", "Timestamp": "2026-01-02T03:04:05.678Z"},
        )

    def test_qkd_metadata_order(self) -> None:
        metadata = scheme_metadata(SCHEMES["qkd"], now=NOW)
        self.assertEqual(
            list(metadata.items()),
            [
                ("Encryption", "Quantum Key Distribution"),
                ("Quantum Entanglement ID", "QE-1767323045678"),
                ("Key Distribution Protocol", "BB84"),
                ("Timestamp", "2026-01-02T03:04:05.678Z"),
            ],
        )

    def test_naive_and_offset_times_are_utc(self) -> None:
        naive = NOW.replace(tzinfo=None)
        self.assertEqual(
            scheme_metadata(SCHEMES["aes"], now=naive)["Timestamp"],
            "2026-01-02T03:04:05.678Z",
        )
        offset = NOW.astimezone(datetime.timezone(datetime.timedelta(hours=2)))
        self.assertEqual(
            scheme_metadata(SCHEMES["otp"], now=offset)["Timestamp"],
            "2026-01-02T03:04:05.678Z",
        )

    def test_extra_metadata(self) -> None:
        metadata = scheme_metadata(
            SCHEMES["pqc"], now=NOW, extra={"Recipient": "bob@example.com"}
        )
        self.assertEqual(metadata["Post-Quantum Algorithm"], "Quantum-Resistant")
        self.assertEqual(list(metadata)[-1], "Recipient")

    def test_decorate_subject(self) -> None:
        self.assertEqual(
            decorate_subject("Lunch", SCHEMES["qkd"]),
            f"{LOCK_EMOJI} Lunch [Quantum Encrypted]",
        )

    def test_seal_message(self) -> None:
        scheme = SCHEMES["pqc"]
        sealed = seal_message(TEST_PAYLOAD, scheme, subject="Hi", now=NOW)
        self.assertEqual(sealed.subject, f"{LOCK_EMOJI} Hi [Post-Quantum Encrypted]")
        self.assertTrue(sealed.body.startswith(f"[PQC ENCRYPTED]\n\n{METADATA_OPEN}\n"))
        self.assertTrue(sealed.body.endswith(PAYLOAD_CLOSE))
        metadata, payload = extract(sealed.body)
        self.assertEqual(metadata, scheme_metadata(scheme, now=NOW))
        self.assertEqual(payload, TEST_PAYLOAD)
        self.assertIsNone(seal_message(TEST_PAYLOAD, scheme, now=NOW).subject)

    def test_matches_deployed_layout(self) -> None:
        sealed = seal_message("QUJD", SCHEMES["aes"], now=NOW)
        expected = build(
            {"Encryption": "AES-256", "Timestamp": "2026-01-02T03:04:05.678Z"},
            "QUJD",
            banner="[AES ENCRYPTED]",
        )
        self.assertEqual(sealed.body, expected)
        self.assertIn(f"{PAYLOAD_OPEN}\nQUJD\n{PAYLOAD_CLOSE}", sealed.body)

    def test_known_banners(self) -> None:
        for scheme in SCHEMES.values():
            self.assertIn(scheme.banner, KNOWN_BANNERS)
        self.assertIn("[AES-GCM ENCRYPTED]", KNOWN_BANNERS)


if __name__ == "__main__":
    unittest.main()
