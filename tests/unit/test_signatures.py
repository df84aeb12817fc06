import unittest

from eth_account import Account
from eth_account.messages import encode_defunct

from foodprint.core.exceptions import InvalidSignature
from foodprint.core.signatures import recover_address, verify


class TestSignatureVerification(unittest.TestCase):
    """EIP-191 personal message signature recovery"""

    def setUp(self):
        self.account = Account.create()
        self.other = Account.create()
        self.message = "FoodPrint: Link wallet as farmer at 2025-11-06T08:00:00.000Z"
        signed = self.account.sign_message(encode_defunct(text=self.message))
        self.signature = "0x" + bytes(signed.signature).hex()

    def test_recovers_signer(self):
        self.assertEqual(recover_address(self.message, self.signature), self.account.address)

    def test_verify_true_for_signer_any_case(self):
        self.assertTrue(verify(self.message, self.signature, self.account.address))
        self.assertTrue(verify(self.message, self.signature, self.account.address.lower()))
        self.assertTrue(verify(self.message, self.signature, self.account.address.upper().replace("0X", "0x")))

    def test_verify_false_for_other_address(self):
        self.assertFalse(verify(self.message, self.signature, self.other.address))

    def test_verify_false_for_different_message(self):
        self.assertFalse(verify(self.message + "!", self.signature, self.account.address))

    def test_truncated_signature_is_invalid(self):
        with self.assertRaises(InvalidSignature):
            verify(self.message, self.signature[:-4], self.account.address)

    def test_non_hex_signature_is_invalid(self):
        with self.assertRaises(InvalidSignature):
            verify(self.message, "0xnot-a-signature", self.account.address)

    def test_corrupted_recovery_byte_is_invalid(self):
        raw = bytearray.fromhex(self.signature[2:])
        raw[64] = 0x05  # v must be 27/28 (or 0/1)
        with self.assertRaises(InvalidSignature):
            verify(self.message, "0x" + raw.hex(), self.account.address)

    def test_corrupted_s_byte_recovers_someone_else(self):
        raw = bytearray.fromhex(self.signature[2:])
        raw[63] ^= 0x01
        self.assertFalse(verify(self.message, "0x" + raw.hex(), self.account.address))


if __name__ == "__main__":
    unittest.main()
