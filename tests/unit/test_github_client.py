"""
Unit tests for the GitHub client.
"""

import base64
import logging
from unittest.mock import Mock, patch

import pytest
import requests

from pr_review_bot.github.client import (
    GitHubClient,
    RepositoryError,
    RateLimitExceeded,
    decode_content,
)
from pr_review_bot.config import AppConfig, GitHubConfig, InferenceConfig
from pr_review_bot.models.pull_request import ChangedFile


def make_response(status_code=200, json_data=None, headers=None):
    response = Mock()
    response.status_code = status_code
    response.ok = status_code < 400
    response.headers = headers or {}
    response.content = b'{}' if json_data is not None else b''
    response.json.return_value = json_data
    response.text = ''
    return response


def encoded(text):
    return base64.b64encode(text.encode('utf-8')).decode('ascii')


class TestGitHubClient:
    """Unit tests for GitHubClient requests and error handling."""

    def setup_method(self):
        self.client = GitHubClient("ghp_test_token", timeout=30)

    def test_client_initialization(self):
        assert self.client.token == "ghp_test_token"
        assert self.client.base_url == "https://api.github.com"
        assert self.client.session.headers["Authorization"] == "token ghp_test_token"
        assert self.client.session.headers["Accept"] == "application/vnd.github.v3+json"

    def test_client_requires_token(self):
        with pytest.raises(ValueError):
            GitHubClient("")
        with pytest.raises(ValueError):
            GitHubClient(None)

    def test_from_config_uses_auth_context(self):
        config = AppConfig(
            github=GitHubConfig(token='ghp_from_env', api_base_url='https://ghe.example.com/api/v3', timeout_seconds=12),
            inference=InferenceConfig(endpoint='https://x', api_key='k', deployment='d'),
        )

        client = GitHubClient.from_config(config.auth, config.github)

        assert client.session.headers["Authorization"] == "token ghp_from_env"
        assert client.base_url == "https://ghe.example.com/api/v3"
        assert client.timeout == 12

    def test_base_url_trailing_slash(self):
        client = GitHubClient("t", base_url="https://ghe.example.com/api/v3/")
        assert client.base_url == "https://ghe.example.com/api/v3"

    @patch('requests.Session.request')
    def test_requests_use_timeout(self, mock_request):
        mock_request.return_value = make_response(json_data=[])

        self.client.get_pull_request_files('octo/widgets', 7)

        assert mock_request.call_args.kwargs['timeout'] == 30

    @patch('requests.Session.request')
    def test_get_pull_request_files(self, mock_request):
        mock_request.return_value = make_response(json_data=[
            {'filename': 'src/a.ts', 'status': 'modified', 'additions': 2, 'deletions': 1},
            {'filename': 'src/b.ts', 'status': 'added', 'additions': 10, 'deletions': 0},
        ])

        files = self.client.get_pull_request_files('octo/widgets', 7)

        assert files == [
            ChangedFile('src/a.ts', 'modified', 2, 1),
            ChangedFile('src/b.ts', 'added', 10, 0),
        ]
        method, url = mock_request.call_args.args
        assert method == 'GET'
        assert url == 'https://api.github.com/repos/octo/widgets/pulls/7/files'
        assert mock_request.call_args.kwargs['params'] == {'page': 1, 'per_page': 100}

    @patch('requests.Session.request')
    def test_get_pull_request_files_empty(self, mock_request):
        mock_request.return_value = make_response(json_data=[])

        assert self.client.get_pull_request_files('octo/widgets', 7) == []

    @patch('requests.Session.request')
    def test_get_pull_request_files_paginates(self, mock_request):
        first_page = [{'filename': f'f{i}.ts'} for i in range(100)]
        second_page = [{'filename': 'last.ts'}]
        mock_request.side_effect = [
            make_response(json_data=first_page),
            make_response(json_data=second_page),
        ]

        files = self.client.get_pull_request_files('octo/widgets', 7)

        assert len(files) == 101
        assert files[-1].filename == 'last.ts'
        assert mock_request.call_args_list[1].kwargs['params']['page'] == 2

    @patch('requests.Session.request')
    def test_get_pull_request_files_error(self, mock_request):
        mock_request.return_value = make_response(404, json_data={'message': 'Not Found'})

        with pytest.raises(RepositoryError) as exc_info:
            self.client.get_pull_request_files('octo/widgets', 7)

        assert exc_info.value.status_code == 404
        assert 'Not Found' in str(exc_info.value)

    @patch('requests.Session.request')
    def test_transport_error_wrapped(self, mock_request):
        mock_request.side_effect = requests.ConnectionError("connection refused")

        with pytest.raises(RepositoryError) as exc_info:
            self.client.get_pull_request_files('octo/widgets', 7)

        assert exc_info.value.status_code is None

    @patch('requests.Session.request')
    def test_rate_limit(self, mock_request):
        mock_request.return_value = make_response(
            403, json_data={'message': 'API rate limit exceeded'},
            headers={'X-RateLimit-Remaining': '0', 'X-RateLimit-Reset': '1700000000'},
        )

        with pytest.raises(RateLimitExceeded) as exc_info:
            self.client.get_pull_request_files('octo/widgets', 7)

        assert isinstance(exc_info.value, RepositoryError)
        assert exc_info.value.status_code == 403

    @pytest.mark.parametrize('body', [['bad gateway'], 'Bad Gateway', 502, []])
    @patch('requests.Session.request')
    def test_non_object_error_body(self, mock_request, body):
        mock_request.return_value = make_response(502, json_data=body)

        with pytest.raises(RepositoryError) as exc_info:
            self.client.get_pull_request_files('octo/widgets', 7)

        assert exc_info.value.status_code == 502
        assert isinstance(exc_info.value.response_data, dict)

    @pytest.mark.parametrize('reset', ['abc', '', '99999999999999999999'])
    @patch('requests.Session.request')
    def test_rate_limit_with_malformed_reset_header(self, mock_request, reset):
        mock_request.return_value = make_response(
            429, json_data={'message': 'slow down'}, headers={'X-RateLimit-Reset': reset},
        )

        with pytest.raises(RateLimitExceeded) as exc_info:
            self.client.create_review_comment('octo/widgets', 7, 'src/a.ts', 'Looks fine.')

        assert exc_info.value.reset_time is not None

    @patch('requests.Session.request')
    def test_get_file_content(self, mock_request):
        mock_request.return_value = make_response(json_data={
            'content': encoded('export const a = 1;\n'),
            'encoding': 'base64',
        })

        content = self.client.get_file_content('octo/widgets', 'src/a.ts', 'feature/login')

        assert content == 'export const a = 1;\n'
        method, url = mock_request.call_args.args
        assert method == 'GET'
        assert url == 'https://api.github.com/repos/octo/widgets/contents/src/a.ts'
        assert mock_request.call_args.kwargs['params'] == {'ref': 'feature/login'}

    @patch('requests.Session.request')
    def test_get_file_content_percent_encodes_filename(self, mock_request):
        mock_request.return_value = make_response(json_data={'content': encoded('x')})

        self.client.get_file_content('octo/widgets', 'a b#1.ts', 'main')

        url = mock_request.call_args.args[1]
        assert url.endswith('/contents/a%20b%231.ts')

    @patch('requests.Session.request')
    def test_get_file_content_encodes_percent_and_non_ascii(self, mock_request):
        mock_request.return_value = make_response(json_data={'content': encoded('x')})

        self.client.get_file_content('octo/widgets', 'docs/100%/réadme.md', 'main')

        url = mock_request.call_args.args[1]
        assert url.endswith('/contents/docs/100%25/r%C3%A9adme.md')

    @patch('requests.Session.request')
    def test_get_file_content_missing_content(self, mock_request):
        mock_request.return_value = make_response(json_data={'type': 'file', 'content': ''})

        assert self.client.get_file_content('octo/widgets', 'big.bin', 'main') is None

    @patch('requests.Session.request')
    def test_get_file_content_directory(self, mock_request):
        mock_request.return_value = make_response(json_data=[{'name': 'a.ts'}, {'name': 'b.ts'}])

        assert self.client.get_file_content('octo/widgets', 'src', 'main') is None

    @patch('requests.Session.request')
    def test_get_file_content_binary(self, mock_request):
        binary = base64.b64encode(b'\x89PNG\r\n\x1a\n\xff\xfe').decode('ascii')
        mock_request.return_value = make_response(json_data={'content': binary, 'encoding': 'base64'})

        assert self.client.get_file_content('octo/widgets', 'logo.png', 'main') is None

    @patch('requests.Session.request')
    def test_get_file_content_failure_is_logged_not_raised(self, mock_request, caplog):
        mock_request.return_value = make_response(404, json_data={'message': 'Not Found'})

        with caplog.at_level(logging.ERROR, logger='pr_review_bot.github.client'):
            content = self.client.get_file_content('octo/widgets', 'deleted.ts', 'main')

        assert content is None
        assert 'deleted.ts' in caplog.text

    @pytest.mark.parametrize('body', [['bad gateway'], 'Bad Gateway', None])
    @patch('requests.Session.request')
    def test_get_file_content_non_object_error_body(self, mock_request, body):
        response = make_response(502, json_data=body)
        if body is None:
            response.content = b'<html>Bad Gateway</html>'
            response.json.side_effect = ValueError('not json')
        mock_request.return_value = response

        assert self.client.get_file_content('octo/widgets', 'src/a.ts', 'main') is None

    @patch('requests.Session.request')
    def test_get_file_content_non_string_content(self, mock_request):
        mock_request.return_value = make_response(json_data={'content': 12345, 'encoding': 'base64'})

        assert self.client.get_file_content('octo/widgets', 'src/a.ts', 'main') is None

    @patch('requests.Session.request')
    def test_get_file_content_transport_error(self, mock_request):
        mock_request.side_effect = requests.Timeout("read timed out")

        assert self.client.get_file_content('octo/widgets', 'a.ts', 'main') is None

    @patch('requests.Session.request')
    def test_create_review_comment(self, mock_request):
        mock_request.return_value = make_response(201, json_data={'id': 99})

        result = self.client.create_review_comment('octo/widgets', 7, 'src/a.ts', 'Looks fine.')

        assert result == {'id': 99}
        method, url = mock_request.call_args.args
        assert method == 'POST'
        assert url == 'https://api.github.com/repos/octo/widgets/issues/7/comments'
        assert mock_request.call_args.kwargs['json'] == {
            'body': 'Code Review for `src/a.ts`:\nLooks fine.'
        }

    @patch('requests.Session.request')
    def test_create_review_comment_non_object_error_body(self, mock_request):
        mock_request.return_value = make_response(502, json_data='upstream error')

        with pytest.raises(RepositoryError) as exc_info:
            self.client.create_review_comment('octo/widgets', 7, 'src/a.ts', 'Looks fine.')

        assert exc_info.value.response_data == {'message': 'upstream error'}
        assert 'upstream error' in str(exc_info.value)

    @patch('requests.Session.request')
    def test_create_review_comment_error_propagates(self, mock_request):
        mock_request.return_value = make_response(403, json_data={'message': 'Resource not accessible'})

        with pytest.raises(RepositoryError) as exc_info:
            self.client.create_review_comment('octo/widgets', 7, 'src/a.ts', 'Looks fine.')

        assert exc_info.value.status_code == 403
        assert exc_info.value.response_data == {'message': 'Resource not accessible'}


class TestDecodeContent:
    """Unit tests for base64 content decoding."""

    def test_decode_hello(self):
        assert decode_content('aGVsbG8=') == 'hello'

    def test_decode_wrapped_lines(self):
        wrapped = 'aGVs\nbG8=\n'
        assert decode_content(wrapped) == 'hello'

    def test_decode_invalid(self):
        with pytest.raises(ValueError):
            decode_content('a')
