"""
KZG Verifier
============

열기 증명을 페어링 방정식 하나로 검증한다.

  e(C - v·G, H) == e(π, τ·H - z·H)

  G = srs_monomial[0] (설정의 G1 생성자), H = g2

**왜 성립하는가**:
  P(x) - v = (x - z) · Q(x) 를 τ에서 평가해 지수로 올린 것이다.
    C - v·G     = (P(τ) - v)·G
    π           = Q(τ)·G
    τ·H - z·H   = (τ - z)·H
  쌍선형성에 의해 양변은 e(G, H)^((P(τ) - v)) 와 e(G, H)^(Q(τ)(τ - z)) 이다.

검증 실패는 오류가 아니라 False 반환이다. 곡선 위에 있지 않은 점
(조작된 입력)도 False이다.

사용 예시:
    >>> verifier = Verifier(setup)
    >>> verifier.verify_opening(commitment, opening)  # True
"""

import logging

from zkp.kzg.errors import LengthMismatch
from zkp.kzg.field import (
    FR, ec_mul, ec_pairing, ec_sub, is_on_curve_g1,
)

logger = logging.getLogger(__name__)


class Verifier:
    """Setup을 참조로 보관하고 열기 증명을 검증한다."""

    def __init__(self, setup):
        self.setup = setup

    def _check_setup(self):
        two_n = self.setup.config.two_n
        for name in ("srs_monomial", "srs_lagrange", "c_blind"):
            actual = len(getattr(self.setup, name))
            if actual != two_n:
                raise LengthMismatch(name, two_n, actual)

    def verify_opening(self, commitment, proof):
        """커밋먼트에 대한 열기 증명을 검증한다.

        Args:
            commitment: 아핀 G1 점 C
            proof: OpeningProof

        Returns:
            bool: 검증 성공 여부

        Raises:
            LengthMismatch: Setup 벡터 길이가 config와 맞지 않을 때
        """
        self._check_setup()

        if not (is_on_curve_g1(commitment) and is_on_curve_g1(proof.proof)):
            logger.warning("Verification rejected: point not on curve")
            return False
        point = proof.point if isinstance(proof.point, FR) else FR(proof.point)
        evaluation = proof.evaluation if isinstance(proof.evaluation, FR) else FR(proof.evaluation)

        g = self.setup.g1
        h = self.setup.g2

        # C - v·G
        c_minus_v = ec_sub(commitment, ec_mul(g, evaluation))
        # τ·H - z·H
        tau_minus_z = ec_sub(self.setup.tau_g2, ec_mul(h, point))

        lhs = ec_pairing(h, c_minus_v)
        rhs = ec_pairing(tau_minus_z, proof.proof)

        result = lhs == rhs
        logger.info("Verification result: %s", result)
        return result
