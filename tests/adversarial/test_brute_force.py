"""
Adversarial tests for brute force attack prevention.

Verifies that the 5-attempt lockout makes code guessing infeasible.

Security rationale:
- A 6-digit code has 900000 possible values
- Without a limit an attacker could enumerate the whole keyspace
- 5 attempts per request gives a 5/900000 success chance per request
- A locked request cannot be verified even with the correct code
"""

import pytest

from src.domain.ports import ContactType, SubmitResult

pytestmark = pytest.mark.adversarial


def guesses(exclude: str, count: int) -> list[str]:
    """Sequential wrong guesses in the code keyspace."""
    return [str(c) for c in range(100000, 100000 + count + 1) if str(c) != exclude][:count]


class TestBruteForceAttacks:
    """
    Adversarial tests simulating code guessing attacks.

    An attacker holding a verification id submits guesses until locked.
    """

    def test_sequential_guessing_locks_after_five(self, target, store, email_sender) -> None:
        """Five wrong guesses lock the request; further guesses are refused."""
        issued = target.request_code("victim@example.com", ContactType.EMAIL)
        code = email_sender.last_code

        results = [target.submit_code(issued.verification_id, g).result for g in guesses(code, 20)]

        assert results[:5] == [SubmitResult.INVALID_CODE] * 5
        assert results[5:] == [SubmitResult.TOO_MANY_ATTEMPTS] * 15
        assert store.get(issued.verification_id).attempts == 5

    def test_correct_code_after_lockout_refused(self, target, store, email_sender) -> None:
        """The real code is useless once the request is locked."""
        issued = target.request_code("victim@example.com", ContactType.EMAIL)
        code = email_sender.last_code
        for g in guesses(code, 5):
            target.submit_code(issued.verification_id, g)

        outcome = target.submit_code(issued.verification_id, code)

        assert outcome.result is SubmitResult.TOO_MANY_ATTEMPTS
        assert store.get(issued.verification_id).is_verified is False

    def test_lockout_is_per_request(self, target, email_sender) -> None:
        """Locking one request leaves a fresh request for the same contact usable."""
        locked = target.request_code("victim@example.com", ContactType.EMAIL)
        for g in guesses(email_sender.last_code, 5):
            target.submit_code(locked.verification_id, g)

        fresh = target.request_code("victim@example.com", ContactType.EMAIL)

        assert target.submit_code(fresh.verification_id, email_sender.last_code).verified

    def test_lookup_path_does_not_bypass_lock(self, target, email_sender) -> None:
        """Guessing through the lookup path cannot reach a locked request."""
        issued = target.request_code("victim@example.com", ContactType.EMAIL)
        code = email_sender.last_code
        for g in guesses(code, 5):
            target.submit_code(issued.verification_id, g)

        outcome = target.submit_code_for_contact("victim@example.com", ContactType.EMAIL, code)

        assert outcome.result is SubmitResult.TOO_MANY_ATTEMPTS

    def test_guessing_verified_request_consumes_nothing(self, target, store, email_sender) -> None:
        """Guesses against a verified request do not touch attempts."""
        issued = target.request_code("victim@example.com", ContactType.EMAIL)
        code = email_sender.last_code
        target.submit_code(issued.verification_id, code)

        for g in guesses(code, 10):
            assert target.submit_code(issued.verification_id, g).result is SubmitResult.ALREADY_VERIFIED

        assert store.get(issued.verification_id).attempts == 0

    def test_guessing_through_lookup_locks_after_five(self, target, store, email_sender) -> None:
        """Wrong guesses by contact count against the request like guesses by id."""
        issued = target.request_code("victim@example.com", ContactType.EMAIL)
        code = email_sender.last_code

        results = [
            target.submit_code_for_contact("victim@example.com", ContactType.EMAIL, g).result
            for g in guesses(code, 5)
        ]
        outcome = target.submit_code_for_contact("victim@example.com", ContactType.EMAIL, code)

        assert results == [SubmitResult.INVALID_CODE] * 5
        assert outcome.result is SubmitResult.TOO_MANY_ATTEMPTS
        assert store.get(issued.verification_id).attempts == 5
        assert store.get(issued.verification_id).is_verified is False
