"""
Verifier tests: completeness at domain and non-domain points, soundness under tampering.
"""

import dataclasses
import random
from types import SimpleNamespace

import pytest

from zkp.kzg.errors import LengthMismatch
from zkp.kzg.field import FR, G1, ec_add, ec_mul, random_scalar
from zkp.kzg.verifier import Verifier


@pytest.fixture(scope="module")
def opening(committed):
    prover, _, _, evals = committed
    return prover.create_opening_proof(evals, FR(31337))


class TestCompleteness:
    """정직한 증명은 항상 통과한다."""

    def test_random_point(self, committed, opening):
        _, verifier, commitment, _ = committed
        assert verifier.verify_opening(commitment, opening) is True

    def test_domain_point(self, committed, small_setup):
        prover, verifier, commitment, evals = committed
        z = small_setup.domain.elements()[5]
        assert verifier.verify_opening(commitment, prover.create_opening_proof(evals, z))

    def test_zero_point(self, committed):
        prover, verifier, commitment, evals = committed
        assert verifier.verify_opening(commitment, prover.create_opening_proof(evals, FR(0)))

    def test_several_random_points(self, committed):
        prover, verifier, commitment, evals = committed
        rng = random.Random(17)
        for _ in range(3):
            z = random_scalar(rng)
            assert verifier.verify_opening(commitment, prover.create_opening_proof(evals, z))

    def test_separate_verifier_instance(self, committed, small_setup, opening):
        _, _, commitment, _ = committed
        assert Verifier(small_setup).verify_opening(commitment, opening)


class TestSoundness:
    """조작된 증명은 거부된다 (False 반환, 예외 없음)."""

    @pytest.mark.parametrize("seed", [1, 2, 3])
    def test_tampered_evaluation(self, committed, opening, seed):
        _, verifier, commitment, _ = committed
        delta = random_scalar(random.Random(seed)) + FR(1)
        tampered = dataclasses.replace(opening, evaluation=opening.evaluation + delta)
        assert verifier.verify_opening(commitment, tampered) is False

    @pytest.mark.parametrize("seed", [4, 5])
    def test_tampered_point(self, committed, opening, seed):
        _, verifier, commitment, _ = committed
        tampered = dataclasses.replace(opening, point=random_scalar(random.Random(seed)))
        assert verifier.verify_opening(commitment, tampered) is False

    @pytest.mark.parametrize("seed", [6, 7])
    def test_tampered_proof(self, committed, opening, seed):
        _, verifier, commitment, _ = committed
        shift = ec_mul(G1, random_scalar(random.Random(seed)) + FR(1))
        tampered = dataclasses.replace(opening, proof=ec_add(opening.proof, shift))
        assert verifier.verify_opening(commitment, tampered) is False

    def test_flipped_low_bit(self, committed, opening):
        _, verifier, commitment, _ = committed
        flipped = FR(int(opening.evaluation) ^ 1)
        tampered = dataclasses.replace(opening, evaluation=flipped)
        assert verifier.verify_opening(commitment, tampered) is False

    def test_wrong_commitment(self, committed, opening):
        _, verifier, commitment, _ = committed
        assert verifier.verify_opening(ec_add(commitment, G1), opening) is False

    def test_identity_proof(self, committed, opening):
        _, verifier, commitment, _ = committed
        tampered = dataclasses.replace(opening, proof=None)
        assert verifier.verify_opening(commitment, tampered) is False

    def test_off_curve_proof(self, committed, opening):
        _, verifier, commitment, _ = committed
        x, y = opening.proof
        tampered = dataclasses.replace(opening, proof=(x, y + y))
        assert verifier.verify_opening(commitment, tampered) is False


class TestMalformedSetup:
    def test_inconsistent_setup_raises(self, small_setup, opening, committed):
        _, _, commitment, _ = committed
        broken = SimpleNamespace(
            config=small_setup.config,
            srs_monomial=small_setup.srs_monomial,
            srs_lagrange=small_setup.srs_lagrange[:-1],
            c_blind=small_setup.c_blind,
            g1=small_setup.g1,
            g2=small_setup.g2,
            tau_g2=small_setup.tau_g2,
        )
        with pytest.raises(LengthMismatch):
            Verifier(broken).verify_opening(commitment, opening)
