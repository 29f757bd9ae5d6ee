"""Unit tests for the SP, IdP and combined settings validators."""

import logging

import pytest

from saml_settings_util.settings.model import Contact, Organization, Saml2Settings
from saml_settings_util.validation import (
    SettingsErrorCode,
    validate_idp_settings,
    validate_settings,
    validate_sp_settings,
)


class FakeHSM:
    """Signing capability stand-in; validators only check its presence."""

    def sign(self, data: bytes, algorithm: str) -> bytes:
        return b"signature"


@pytest.fixture
def valid_sp_settings() -> Saml2Settings:
    """Settings passing every SP check, without credentials."""
    return Saml2Settings(
        sp_entity_id="https://sp.example.com/metadata",
        sp_assertion_consumer_service_url="https://sp.example.com/acs",
    )


@pytest.fixture
def valid_settings() -> Saml2Settings:
    """Settings passing every SP and IdP check."""
    return Saml2Settings(
        sp_entity_id="https://sp.example.com/metadata",
        sp_assertion_consumer_service_url="https://sp.example.com/acs",
        idp_entity_id="https://idp.example.com/metadata",
        idp_single_sign_on_service_url="https://idp.example.com/sso",
        idp_cert_fingerprint="AA:BB:CC:DD",
    )


class TestErrorCodes:
    """Test the error code enumeration."""

    def test_codes_compare_equal_to_their_strings(self):
        assert SettingsErrorCode.SP_ENTITY_ID_NOT_FOUND == "sp_entityId_not_found"
        assert SettingsErrorCode.IDP_SSO_URL_INVALID == "idp_sso_url_invalid"
        assert str(SettingsErrorCode.SP_ACS_NOT_FOUND) == "sp_acs_not_found"

    def test_exact_code_set(self):
        assert {code.value for code in SettingsErrorCode} == {
            "sp_entityId_not_found",
            "sp_acs_not_found",
            "sp_cert_not_found_and_required",
            "contact_type_invalid",
            "contact_not_enough_data",
            "organization_not_enough_data",
            "use_either_hsm_or_private_key",
            "idp_entityId_not_found",
            "idp_sso_url_invalid",
            "idp_cert_or_fingerprint_not_found_and_required",
            "idp_cert_not_found_and_required",
        }

    def test_is_idp(self):
        assert SettingsErrorCode.IDP_ENTITY_ID_NOT_FOUND.is_idp
        assert not SettingsErrorCode.SP_ACS_NOT_FOUND.is_idp
        assert not SettingsErrorCode.CONTACT_TYPE_INVALID.is_idp


class TestValidateSpSettings:
    """Test SP settings validation."""

    def test_valid_sp_settings_return_no_errors(self, valid_sp_settings):
        assert validate_sp_settings(valid_sp_settings) == []

    @pytest.mark.parametrize(
        "overrides",
        [
            {},
            {"sp_assertion_consumer_service_url": None},
            {"authn_requests_signed": True},
            {"contacts": (Contact(contact_type="bogus"),)},
            {"hsm": FakeHSM()},
        ],
    )
    def test_empty_entity_id_always_reported(self, overrides):
        # Arrange
        values = {
            "sp_entity_id": "",
            "sp_assertion_consumer_service_url": "https://sp.example.com/acs",
        }
        values.update(overrides)

        # Act
        errors = validate_sp_settings(Saml2Settings(**values))

        # Assert
        assert SettingsErrorCode.SP_ENTITY_ID_NOT_FOUND in errors
        assert errors[0] == SettingsErrorCode.SP_ENTITY_ID_NOT_FOUND

    def test_missing_acs_reported(self):
        settings = Saml2Settings(sp_entity_id="https://sp.example.com/metadata")

        assert validate_sp_settings(settings) == [SettingsErrorCode.SP_ACS_NOT_FOUND]

    @pytest.mark.parametrize("credential", ["certificate", "private_key", "both"])
    def test_signing_without_credentials_reported(self, valid_sp_settings, rsa_key_pair, credential):
        # Arrange
        private_key, cert = rsa_key_pair
        values = {
            "sp_entity_id": valid_sp_settings.sp_entity_id,
            "sp_assertion_consumer_service_url": valid_sp_settings.sp_assertion_consumer_service_url,
            "authn_requests_signed": True,
        }
        if credential == "certificate":
            values["sp_private_key"] = private_key
        elif credential == "private_key":
            values["sp_x509cert"] = cert

        # Act
        errors = validate_sp_settings(Saml2Settings(**values))

        # Assert
        assert errors == [SettingsErrorCode.SP_CERT_NOT_FOUND_AND_REQUIRED]

    @pytest.mark.parametrize(
        "flag",
        [
            "logout_request_signed",
            "logout_response_signed",
            "want_assertions_encrypted",
            "want_name_id_encrypted",
        ],
    )
    def test_each_signing_or_encryption_flag_requires_credentials(self, flag):
        settings = Saml2Settings(
            sp_entity_id="https://sp.example.com/metadata",
            sp_assertion_consumer_service_url="https://sp.example.com/acs",
            **{flag: True},
        )

        assert validate_sp_settings(settings) == [
            SettingsErrorCode.SP_CERT_NOT_FOUND_AND_REQUIRED
        ]

    def test_signing_with_credentials_is_valid(self, rsa_key_pair):
        private_key, cert = rsa_key_pair
        settings = Saml2Settings(
            sp_entity_id="https://sp.example.com/metadata",
            sp_assertion_consumer_service_url="https://sp.example.com/acs",
            sp_x509cert=cert,
            sp_private_key=private_key,
            authn_requests_signed=True,
            want_assertions_encrypted=True,
        )

        assert validate_sp_settings(settings) == []

    def test_hsm_replaces_certificate_and_key(self):
        settings = Saml2Settings(
            sp_entity_id="https://sp.example.com/metadata",
            sp_assertion_consumer_service_url="https://sp.example.com/acs",
            authn_requests_signed=True,
            hsm=FakeHSM(),
        )

        assert validate_sp_settings(settings) == []

    @pytest.mark.parametrize(
        "entity_id,acs_url",
        [
            ("https://sp.example.com/metadata", "https://sp.example.com/acs"),
            ("", None),
        ],
    )
    def test_hsm_and_private_key_always_reported(self, rsa_key_pair, entity_id, acs_url):
        private_key, cert = rsa_key_pair
        settings = Saml2Settings(
            sp_entity_id=entity_id,
            sp_assertion_consumer_service_url=acs_url,
            sp_x509cert=cert,
            sp_private_key=private_key,
            hsm=FakeHSM(),
        )

        errors = validate_sp_settings(settings)

        assert SettingsErrorCode.USE_EITHER_HSM_OR_PRIVATE_KEY in errors
        assert errors[-1] == SettingsErrorCode.USE_EITHER_HSM_OR_PRIVATE_KEY

    def test_bogus_contact_type_reported(self, valid_sp_settings):
        settings = Saml2Settings(
            sp_entity_id=valid_sp_settings.sp_entity_id,
            sp_assertion_consumer_service_url="https://sp.example.com/acs",
            contacts=(Contact(contact_type="bogus", company="Example Inc."),),
        )

        assert validate_sp_settings(settings) == [SettingsErrorCode.CONTACT_TYPE_INVALID]

    def test_contact_without_data_reported(self):
        settings = Saml2Settings(
            sp_entity_id="https://sp.example.com/metadata",
            sp_assertion_consumer_service_url="https://sp.example.com/acs",
            contacts=(Contact(contact_type="technical"),),
        )

        assert validate_sp_settings(settings) == [SettingsErrorCode.CONTACT_NOT_ENOUGH_DATA]

    def test_contact_with_company_is_valid(self):
        settings = Saml2Settings(
            sp_entity_id="https://sp.example.com/metadata",
            sp_assertion_consumer_service_url="https://sp.example.com/acs",
            contacts=(Contact(contact_type="technical", company="Example Inc."),),
        )

        assert validate_sp_settings(settings) == []

    def test_both_contact_checks_fire_per_contact(self):
        """Each contact contributes its own codes, in contact order."""
        settings = Saml2Settings(
            sp_entity_id="https://sp.example.com/metadata",
            sp_assertion_consumer_service_url="https://sp.example.com/acs",
            contacts=(
                Contact(contact_type="bogus"),
                Contact(contact_type="support", given_name="Support"),
                Contact(contact_type="billing"),
            ),
        )

        assert validate_sp_settings(settings) == [
            SettingsErrorCode.CONTACT_TYPE_INVALID,
            SettingsErrorCode.CONTACT_NOT_ENOUGH_DATA,
            SettingsErrorCode.CONTACT_NOT_ENOUGH_DATA,
        ]

    def test_incomplete_organization_reported(self):
        settings = Saml2Settings(
            sp_entity_id="https://sp.example.com/metadata",
            sp_assertion_consumer_service_url="https://sp.example.com/acs",
            organization=Organization(name="example", display_name="", url="https://example.com"),
        )

        assert validate_sp_settings(settings) == [
            SettingsErrorCode.ORGANIZATION_NOT_ENOUGH_DATA
        ]

    def test_all_checks_collected_in_order(self, rsa_key_pair):
        # Arrange
        private_key, _ = rsa_key_pair
        settings = Saml2Settings(
            sp_entity_id="",
            logout_request_signed=True,
            contacts=(Contact(contact_type="sales"),),
            organization=Organization(),
            sp_private_key=private_key,
            hsm=FakeHSM(),
        )

        # Act
        errors = validate_sp_settings(settings)

        # Assert
        assert errors == [
            SettingsErrorCode.SP_ENTITY_ID_NOT_FOUND,
            SettingsErrorCode.SP_ACS_NOT_FOUND,
            SettingsErrorCode.CONTACT_TYPE_INVALID,
            SettingsErrorCode.CONTACT_NOT_ENOUGH_DATA,
            SettingsErrorCode.ORGANIZATION_NOT_ENOUGH_DATA,
            SettingsErrorCode.USE_EITHER_HSM_OR_PRIVATE_KEY,
        ]

    def test_each_code_is_logged(self, caplog):
        settings = Saml2Settings()

        with caplog.at_level(logging.ERROR, logger="saml_settings_util.validation"):
            validate_sp_settings(settings)

        assert "sp_entityId_not_found" in caplog.text
        assert "sp_acs_not_found" in caplog.text


class TestValidateIdpSettings:
    """Test IdP settings validation."""

    def test_valid_idp_settings_with_fingerprint(self, valid_settings):
        assert validate_idp_settings(valid_settings) == []

    def test_valid_idp_settings_with_certificate(self, rsa_key_pair):
        _, cert = rsa_key_pair
        settings = Saml2Settings(
            idp_entity_id="https://idp.example.com/metadata",
            idp_single_sign_on_service_url="https://idp.example.com/sso",
            idp_x509cert=cert,
            name_id_encrypted=True,
        )

        assert validate_idp_settings(settings) == []

    def test_valid_idp_settings_with_multi_certificates(self, rsa_key_pair):
        _, cert = rsa_key_pair
        settings = Saml2Settings(
            idp_entity_id="https://idp.example.com/metadata",
            idp_single_sign_on_service_url="https://idp.example.com/sso",
            idp_x509cert_multi=[cert],
            name_id_encrypted=True,
        )

        assert validate_idp_settings(settings) == []

    def test_empty_idp_section_reports_three_codes(self):
        assert validate_idp_settings(Saml2Settings()) == [
            SettingsErrorCode.IDP_ENTITY_ID_NOT_FOUND,
            SettingsErrorCode.IDP_SSO_URL_INVALID,
            SettingsErrorCode.IDP_CERT_OR_FINGERPRINT_NOT_FOUND_AND_REQUIRED,
        ]

    def test_fingerprint_is_not_enough_for_name_id_encryption(self):
        settings = Saml2Settings(
            idp_entity_id="https://idp.example.com/metadata",
            idp_single_sign_on_service_url="https://idp.example.com/sso",
            idp_cert_fingerprint="AA:BB",
            name_id_encrypted=True,
        )

        assert validate_idp_settings(settings) == [
            SettingsErrorCode.IDP_CERT_NOT_FOUND_AND_REQUIRED
        ]

    def test_empty_multi_certificate_list_is_not_sufficient(self):
        settings = Saml2Settings(
            idp_entity_id="https://idp.example.com/metadata",
            idp_single_sign_on_service_url="https://idp.example.com/sso",
            idp_x509cert_multi=(),
            name_id_encrypted=True,
        )

        assert validate_idp_settings(settings) == [
            SettingsErrorCode.IDP_CERT_OR_FINGERPRINT_NOT_FOUND_AND_REQUIRED,
            SettingsErrorCode.IDP_CERT_NOT_FOUND_AND_REQUIRED,
        ]


class TestValidateSettings:
    """Test the combined validator."""

    def test_valid_settings(self, valid_settings):
        assert validate_settings(valid_settings) == []

    def test_sp_only_never_reports_idp_codes(self):
        settings = Saml2Settings(sp_entity_id="", name_id_encrypted=True)

        errors = validate_settings(settings, sp_validation_only=True)

        assert errors
        assert not any(error.is_idp for error in errors)

    def test_missing_idp_entity_id_and_sso_url_reported(self, valid_sp_settings):
        errors = validate_settings(valid_sp_settings, sp_validation_only=False)

        assert SettingsErrorCode.IDP_ENTITY_ID_NOT_FOUND in errors
        assert SettingsErrorCode.IDP_SSO_URL_INVALID in errors

    def test_sp_codes_precede_idp_codes(self):
        errors = validate_settings(Saml2Settings(), sp_validation_only=False)

        idp_positions = [i for i, error in enumerate(errors) if error.is_idp]
        sp_positions = [i for i, error in enumerate(errors) if not error.is_idp]
        assert max(sp_positions) < min(idp_positions)

    def test_record_flag_used_when_mode_not_given(self):
        settings = Saml2Settings(
            sp_entity_id="https://sp.example.com/metadata",
            sp_assertion_consumer_service_url="https://sp.example.com/acs",
            sp_validation_only=True,
        )

        assert validate_settings(settings) == []
        assert validate_settings(settings, sp_validation_only=False) == [
            SettingsErrorCode.IDP_ENTITY_ID_NOT_FOUND,
            SettingsErrorCode.IDP_SSO_URL_INVALID,
            SettingsErrorCode.IDP_CERT_OR_FINGERPRINT_NOT_FOUND_AND_REQUIRED,
        ]

    def test_end_to_end_scenario(self):
        """Empty entity ID, valid ACS, no flags, no IdP values."""
        # Arrange
        settings = Saml2Settings(
            sp_entity_id="",
            sp_assertion_consumer_service_url="https://sp.example.com/acs",
        )

        # Act
        errors = validate_settings(settings, sp_validation_only=False)

        # Assert
        assert errors == [
            SettingsErrorCode.SP_ENTITY_ID_NOT_FOUND,
            SettingsErrorCode.IDP_ENTITY_ID_NOT_FOUND,
            SettingsErrorCode.IDP_SSO_URL_INVALID,
            SettingsErrorCode.IDP_CERT_OR_FINGERPRINT_NOT_FOUND_AND_REQUIRED,
        ]

    def test_validation_is_idempotent(self, rsa_key_pair):
        private_key, _ = rsa_key_pair
        settings = Saml2Settings(
            sp_entity_id="",
            authn_requests_signed=True,
            contacts=(Contact(contact_type="bogus"),),
            sp_private_key=private_key,
            hsm=FakeHSM(),
        )

        first = validate_settings(settings, sp_validation_only=False)
        second = validate_settings(settings, sp_validation_only=False)

        assert first == second
        assert validate_sp_settings(settings) == validate_sp_settings(settings)
        assert validate_idp_settings(settings) == validate_idp_settings(settings)

    def test_validation_does_not_modify_settings(self, valid_settings):
        before = valid_settings.describe()

        validate_settings(valid_settings)

        assert valid_settings.describe() == before
