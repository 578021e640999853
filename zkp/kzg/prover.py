"""
KZG Prover: 위트니스 커밋과 열기 증명
======================================

**커밋 (prove)**:

  ┌─────────────────────────────────────────────────────┐
  │  1. 위트니스 x₁..x_n ← FR (난수)                      │
  │  2. fᵢ = H(bytes(xᵢ)) mod r   (SHA-256, 병렬)        │
  │  3. f를 길이 2n으로 0-패딩                            │
  │  4. f_eval = FFT(f)           (도메인 크기 2n)        │
  │  5. bᵢ = c_blindᵢ · f_evalᵢ   (아다마르 곱, 병렬)     │
  │  6. C = MSM(srs_lagrange, b)                         │
  └─────────────────────────────────────────────────────┘

  b는 다항식 P의 평가 표현이며, 호출자가 보관했다가 열기 증명에 다시 넘긴다.

**열기 증명 (create_opening_proof)**:
  1. P = IFFT(b)  (계수 표현)
  2. v = P(z)
  3. Q(x) = (P(x) - v) / (x - z)   (나머지가 0이어야 한다)
  4. π = MSM(srs_monomial[:deg Q + 1], Q의 계수)

사용 예시:
    >>> prover = Prover(setup)
    >>> commitment, evals = prover.prove()
    >>> opening = prover.create_opening_proof(evals, FR(7))
"""

import logging
import time
from dataclasses import dataclass
from typing import Any

from zkp.kzg.config import PARALLEL_MIN_FIELD_ITEMS
from zkp.kzg.domain import EvaluationDomain
from zkp.kzg.errors import DegreeTooLarge, ExactDivisionFailure
from zkp.kzg.field import FR, fr_to_bytes, hash_to_field, random_scalar
from zkp.kzg.msm import msm
from zkp.kzg.parallel import parallel_map
from zkp.kzg.polynomial import Polynomial, poly_div

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OpeningProof:
    """커밋된 다항식이 point에서 evaluation 값을 가진다는 주장과 그 증거.

    속성:
        point: 평가 점 z (FR)
        evaluation: 주장하는 평가값 v = P(z) (FR)
        proof: 몫 다항식 커밋먼트 π (아핀 G1 점)
    """
    point: FR
    evaluation: FR
    proof: Any


def hash_witness_entry(x):
    """fᵢ = SHA-256(표준 바이트(xᵢ)) mod r"""
    return hash_to_field(fr_to_bytes(x))


def _hadamard_entry(pair):
    c, f = pair
    return c * f


class Prover:
    """위트니스를 커밋하고 열기 증명을 만든다.

    Setup은 복사하지 않고 참조로 보관한다.
    """

    def __init__(self, setup):
        self.setup = setup

    def prove(self, rng=None):
        """난수 위트니스를 만들고 커밋한다.

        Args:
            rng: 위트니스 난수 생성기 (None이면 OS CSPRNG)

        Returns:
            tuple: (커밋먼트 C (아핀 G1 점), 평가 표현 b (FR 리스트, 길이 2n))
        """
        config = self.setup.config
        workers = config.workers
        n = config.n
        logger.info("Starting prover for n = %d", n)
        start = time.perf_counter()

        # 1. 위트니스
        witness = [random_scalar(rng) for _ in range(n)]

        # 2. fᵢ = H(xᵢ)
        f_values = parallel_map(
            hash_witness_entry, witness, workers=workers, min_items=PARALLEL_MIN_FIELD_ITEMS
        )

        # 3-4. 0-패딩 후 FFT
        logger.info("Computing FFT over %d points", config.two_n)
        f_eval = self.setup.domain.fft(f_values)

        # 5. 블라인딩 아다마르 곱
        blinded = parallel_map(
            _hadamard_entry, list(zip(self.setup.c_blind, f_eval)),
            workers=workers, min_items=PARALLEL_MIN_FIELD_ITEMS,
        )

        # 6. C = Σ bᵢ · [Lᵢ(τ)]₁
        logger.info("Computing commitment")
        commitment = msm(self.setup.srs_lagrange, blinded)

        logger.info("Prover completed in %.2fs", time.perf_counter() - start)
        return commitment, blinded

    def create_opening_proof(self, evals, point):
        """P(point)에 대한 열기 증명을 만든다.

        Args:
            evals: prove()가 반환한 평가 표현 (길이는 지원되는 2의 거듭제곱)
            point: 평가 점 z (도메인 안팎 모두 가능)

        Returns:
            OpeningProof

        Raises:
            InvalidDomainSize: len(evals)가 FFT 도메인 크기로 부적합할 때
            DegreeTooLarge: 몫 다항식이 단항식 SRS보다 길 때
            ExactDivisionFailure: (x - z)로 나누어 떨어지지 않을 때
        """
        if not isinstance(point, FR):
            point = FR(point)
        logger.debug("Creating opening proof")

        # 1. 평가 표현 → 계수 표현
        domain = self.setup.domain
        if len(evals) != domain.size:
            domain = EvaluationDomain(len(evals))
        poly = Polynomial.from_evaluations(evals, domain)

        # 2. v = P(z)
        evaluation = poly.evaluate(point)

        # 3. Q(x) = (P(x) - v) / (x - z)
        quotient, remainder = poly_div(poly - evaluation, Polynomial.linear(point))
        if not remainder.is_zero():
            raise ExactDivisionFailure(
                "몫 다항식 계산 실패: (x - z)로 나눈 나머지가 0이 아닙니다"
            )

        # 4-5. π = Σ qᵢ · [τⁱ]₁
        needed = len(quotient.coeffs)
        available = len(self.setup.srs_monomial)
        if needed > available:
            raise DegreeTooLarge(needed, available)
        proof = msm(self.setup.srs_monomial[:needed], quotient.coeffs)

        return OpeningProof(point=point, evaluation=evaluation, proof=proof)
