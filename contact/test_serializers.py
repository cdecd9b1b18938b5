"""
Tests for contact form validation rules.
"""
import unicodedata

import pytest

from contact.serializers import ContactFormSubmitSerializer, validate_submission


def fields_of(violations):
    return [violation['field'] for violation in violations]


class TestValidSubmissions:
    """Valid payloads come back normalized with no violations."""

    @pytest.mark.parametrize('name', ['Jo', 'Asha Verma', 'José Álvarez', 'Zoë  Smith'])
    def test_accepts_letter_and_space_names(self, valid_payload, name):
        data, violations = validate_submission({**valid_payload, 'name': name})

        assert violations == []
        assert data['name'] == name

    def test_decomposed_accents_are_composed(self, valid_payload):
        name = unicodedata.normalize('NFD', 'José Álvarez')

        data, violations = validate_submission({**valid_payload, 'name': name})

        assert violations == []
        assert data['name'] == unicodedata.normalize('NFC', 'José Álvarez')

    def test_email_is_trimmed_and_lowercased(self, valid_payload):
        data, violations = validate_submission({**valid_payload, 'email': '  Asha.Verma@Example.COM  '})

        assert violations == []
        assert data['email'] == 'asha.verma@example.com'

    def test_fields_are_trimmed(self, valid_payload):
        data, _ = validate_submission({
            **valid_payload,
            'name': '  Asha Verma  ',
            'message': '   Hello, I would like to talk about a project.   ',
        })

        assert data['name'] == 'Asha Verma'
        assert data['message'] == 'Hello, I would like to talk about a project.'

    def test_message_is_html_escaped(self, valid_payload):
        data, violations = validate_submission({
            **valid_payload, 'message': '<script>alert("hi")</script> & more'
        })

        assert violations == []
        assert '<script>' not in data['message']
        assert data['message'].startswith('&lt;script&gt;')
        assert '&amp; more' in data['message']

    def test_profile_url_maps_to_model_field(self, valid_payload):
        data, _ = validate_submission(valid_payload)

        assert data['linkedin_profile'] == 'https://www.linkedin.com/in/asha-verma'
        assert 'linkedinProfile' not in data

    def test_optional_fields_may_be_omitted(self, valid_payload):
        payload = {k: v for k, v in valid_payload.items() if k not in ('phone', 'linkedinProfile')}

        data, violations = validate_submission(payload)

        assert violations == []
        assert data.get('phone') is None
        assert data.get('linkedin_profile') is None

    def test_blank_optional_fields_become_none(self, valid_payload):
        data, violations = validate_submission({**valid_payload, 'phone': '', 'linkedinProfile': '  '})

        assert violations == []
        assert data['phone'] is None
        assert data['linkedin_profile'] is None

    def test_message_boundaries(self, valid_payload):
        for message in ['a' * 10, 'a' * 1000]:
            _, violations = validate_submission({**valid_payload, 'message': message})
            assert violations == []


class TestInvalidSubmissions:
    """Each failing field yields exactly one violation record."""

    @pytest.mark.parametrize('message', ['short', '   short msg   ', 'a' * 1001])
    def test_message_length_gives_single_message_violation(self, valid_payload, message):
        _, violations = validate_submission({**valid_payload, 'message': message})

        assert fields_of(violations) == ['message']
        assert violations[0]['message'] == 'Message must be between 10 and 1000 characters'
        assert violations[0]['value'] == message

    def test_missing_required_fields(self):
        _, violations = validate_submission({})

        assert sorted(fields_of(violations)) == ['email', 'message', 'name']
        messages = {v['field']: v['message'] for v in violations}
        assert messages['name'] == 'Name is required'
        assert messages['email'] == 'Email is required'
        assert messages['message'] == 'Message is required'

    def test_null_required_fields(self):
        _, violations = validate_submission({'name': None, 'email': None, 'message': None})

        messages = {v['field']: v['message'] for v in violations}
        assert messages == {
            'name': 'Name is required',
            'email': 'Email is required',
            'message': 'Message is required',
        }

    def test_short_name_and_message(self):
        _, violations = validate_submission({'name': 'J', 'email': 'a@b.com', 'message': 'short'})

        assert fields_of(violations) == ['name', 'message']
        assert violations[0] == {
            'field': 'name',
            'message': 'Name must be between 2 and 100 characters',
            'value': 'J',
        }

    @pytest.mark.parametrize('name', ['R2D2', 'Jane_Doe', "O'Brien", 'Jane-Doe'])
    def test_rejects_names_with_non_letters(self, valid_payload, name):
        _, violations = validate_submission({**valid_payload, 'name': name})

        assert violations == [{
            'field': 'name',
            'message': 'Name can only contain letters and spaces',
            'value': name,
        }]

    def test_invalid_email(self, valid_payload):
        _, violations = validate_submission({**valid_payload, 'email': 'not-an-email'})

        assert violations == [{
            'field': 'email',
            'message': 'Please provide a valid email address',
            'value': 'not-an-email',
        }]

    @pytest.mark.parametrize('phone', ['12', 'call me maybe'])
    def test_invalid_phone(self, valid_payload, phone):
        _, violations = validate_submission({**valid_payload, 'phone': phone})

        assert fields_of(violations) == ['phone']
        assert violations[0]['message'] == 'Please provide a valid phone number'

    def test_phone_too_long(self, valid_payload):
        _, violations = validate_submission({**valid_payload, 'phone': '9' * 21})

        assert violations[0]['message'] == 'Phone number is too long'

    @pytest.mark.parametrize('url', ['linkedin.com/in/someone', 'ftp://example.com/me', 'not a url'])
    def test_invalid_profile_url(self, valid_payload, url):
        _, violations = validate_submission({**valid_payload, 'linkedinProfile': url})

        assert violations == [{
            'field': 'linkedinProfile',
            'message': 'Please provide a valid URL for LinkedIn/Naukri profile',
            'value': url,
        }]

    def test_non_object_payload(self):
        _, violations = validate_submission(['not', 'a', 'dict'])

        assert len(violations) == 1
        assert violations[0]['value'] is None


class TestIdempotence:

    @pytest.mark.parametrize('payload', [
        {'name': 'Asha Verma', 'email': 'ASHA@EXAMPLE.COM', 'message': 'Tell me <b>more</b> please'},
        {'name': 'J', 'email': 'bad', 'message': 'short'},
    ])
    def test_same_input_same_result(self, payload):
        assert validate_submission(payload) == validate_submission(payload)

    def test_serializer_does_not_mutate_input(self, valid_payload):
        original = dict(valid_payload)
        ContactFormSubmitSerializer(data=valid_payload).is_valid()

        assert valid_payload == original
