"""
Prover tests: commit path (hash → pad → FFT → Hadamard → MSM) and opening path.
"""

import dataclasses
import random

import pytest

from zkp.kzg import prover as prover_module
from zkp.kzg.config import PARALLEL_MIN_FIELD_ITEMS
from zkp.kzg.errors import DegreeTooLarge, ExactDivisionFailure, InvalidDomainSize
from zkp.kzg.field import FR, ec_eq, fr_to_bytes, hash_to_field, random_scalar
from zkp.kzg.msm import msm
from zkp.kzg.polynomial import Polynomial, poly_div
from zkp.kzg.prover import OpeningProof, Prover, hash_witness_entry


def _expected_blinded(setup, seed):
    """같은 시드로 위트니스를 재생성해 평가 표현을 직접 계산한다."""
    rng = random.Random(seed)
    witness = [random_scalar(rng) for _ in range(setup.config.n)]
    f = [hash_to_field(fr_to_bytes(x)) for x in witness]
    f_eval = setup.domain.fft(f + [FR(0)] * (setup.config.two_n - len(f)))
    return [c * e for c, e in zip(setup.c_blind, f_eval)]


class TestCommit:
    """Prover.prove 테스트."""

    def test_evals_length(self, committed, small_setup):
        _, _, _, evals = committed
        assert len(evals) == small_setup.config.two_n

    def test_transform_order(self, committed, small_setup, witness_seed):
        """hash → pad → FFT → Hadamard 순서로 만든 값과 일치."""
        _, _, _, evals = committed
        assert evals == _expected_blinded(small_setup, witness_seed)

    def test_commitment_is_lagrange_msm(self, committed, small_setup):
        _, _, commitment, evals = committed
        assert ec_eq(commitment, msm(small_setup.srs_lagrange, evals))

    def test_commitment_matches_monomial_commitment(self, committed, small_setup):
        """Lagrange 기저 커밋 == 계수 표현의 단항식 기저 커밋 (기저 변환 일관성)."""
        _, _, commitment, evals = committed
        coeffs = small_setup.domain.ifft(evals)
        assert ec_eq(commitment, msm(small_setup.srs_monomial, coeffs))

    def test_commitment_not_identity(self, committed):
        _, _, commitment, _ = committed
        assert commitment is not None

    def test_field_maps_use_field_threshold(self, small_setup, monkeypatch):
        """해시와 아다마르 곱 map은 필드 연산용 기준으로 프로세스 풀 사용 여부를 정한다."""
        calls = []

        def recording_map(func, items, workers=None, min_items=None):
            calls.append(min_items)
            return [func(item) for item in items]

        monkeypatch.setattr(prover_module, "parallel_map", recording_map)
        Prover(small_setup).prove(rng=random.Random(3))
        assert calls == [PARALLEL_MIN_FIELD_ITEMS, PARALLEL_MIN_FIELD_ITEMS]

    def test_fresh_witness_each_run(self, small_setup):
        prover = Prover(small_setup)
        c1, _ = prover.prove()
        c2, _ = prover.prove()
        assert not ec_eq(c1, c2)

    def test_prover_shares_setup(self, small_setup):
        assert Prover(small_setup).setup is small_setup

    def test_hash_witness_entry(self):
        x = FR(12345)
        assert hash_witness_entry(x) == hash_to_field(fr_to_bytes(x))


class TestOpeningProof:
    """Prover.create_opening_proof 테스트."""

    def test_evaluation_matches_polynomial(self, committed, small_setup):
        prover, _, _, evals = committed
        z = FR(987654321)
        opening = prover.create_opening_proof(evals, z)
        poly = Polynomial.from_evaluations(evals, small_setup.domain)
        assert opening.point == z
        assert opening.evaluation == poly.evaluate(z)

    def test_domain_point_evaluation_is_stored_eval(self, committed, small_setup):
        prover, _, _, evals = committed
        points = small_setup.domain.elements()
        opening = prover.create_opening_proof(evals, points[3])
        assert opening.evaluation == evals[3]

    def test_proof_is_quotient_commitment(self, committed, small_setup):
        prover, _, _, evals = committed
        z = FR(42)
        opening = prover.create_opening_proof(evals, z)
        poly = Polynomial.from_evaluations(evals, small_setup.domain)
        quotient, remainder = poly_div(poly - opening.evaluation, Polynomial.linear(z))
        assert remainder.is_zero()
        expected = msm(small_setup.srs_monomial[:len(quotient)], quotient.coeffs)
        assert ec_eq(opening.proof, expected)

    def test_int_point_accepted(self, committed):
        prover, _, _, evals = committed
        opening = prover.create_opening_proof(evals, 5)
        assert opening.point == FR(5)

    def test_opening_is_immutable(self, committed):
        prover, _, _, evals = committed
        opening = prover.create_opening_proof(evals, FR(1))
        assert isinstance(opening, OpeningProof)
        with pytest.raises(dataclasses.FrozenInstanceError):
            opening.evaluation = FR(0)

    def test_constant_polynomial(self, small_setup):
        """상수 다항식의 몫은 0 → 증명은 항등원."""
        prover = Prover(small_setup)
        evals = [FR(9)] * small_setup.config.two_n
        opening = prover.create_opening_proof(evals, FR(3))
        assert opening.evaluation == FR(9)
        assert opening.proof is None

    def test_degree_too_large(self, small_setup):
        """SRS보다 큰 도메인의 평가 표현 → 몫 다항식이 SRS를 넘는다."""
        prover = Prover(small_setup)
        rng = random.Random(3)
        evals = [random_scalar(rng) for _ in range(2 * small_setup.config.two_n)]
        with pytest.raises(DegreeTooLarge) as excinfo:
            prover.create_opening_proof(evals, FR(7))
        assert excinfo.value.available == small_setup.config.two_n

    def test_unsupported_evals_length(self, small_setup):
        prover = Prover(small_setup)
        with pytest.raises(InvalidDomainSize):
            prover.create_opening_proof([FR(1)] * 6, FR(2))

    def test_evaluation_mismatch_is_fatal(self, committed, monkeypatch):
        """평가값이 어긋나면 나머지가 0이 아니고 ExactDivisionFailure가 난다."""
        prover, _, _, evals = committed
        original = Polynomial.evaluate
        monkeypatch.setattr(
            Polynomial, "evaluate", lambda self, point: original(self, point) + FR(1)
        )
        with pytest.raises(ExactDivisionFailure):
            prover.create_opening_proof(evals, FR(11))
