"""
평가 도메인과 FFT / IFFT (Number Theoretic Transform)
=======================================================

크기 N(2의 거듭제곱)의 도메인 H = {1, ω, ω², ..., ω^(N-1)} 위에서
계수 표현 ↔ 평가 표현을 변환한다.

  - fft:  계수 [c₀, ..., c_{N-1}] → 평가값 [p(1), p(ω), ..., p(ω^{N-1})]
  - ifft: 평가값 → 계수 (보간)

필드 원소는 재귀적 Cooley-Tukey radix-2 알고리즘으로 변환한다.

**그룹 원소에 대한 FFT**:
  FFT는 선형 변환이므로, 필드 원소 대신 G1 점 벡터에 같은 계수를 적용할 수 있다.
  필드 곱셈 ω^k · v 자리에 스칼라 곱셈 ω^k · P가 들어간다.
  단항식 SRS [τⁱ·G]에 IFFT를 적용하면 Lagrange SRS [Lᵢ(τ)·G]가 된다.

  ifft_group([G, τG, τ²G, ...]) = [L₀(τ)·G, L₁(τ)·G, ...]

  스칼라 곱셈이 비싸므로 그룹 변환은 반복(iterative) 버전을 쓴다.
  비트 반전 순서로 재배열한 뒤 log N 단계를 거치며, 한 단계 안의
  버터플라이 N/2개는 서로 독립이므로 parallel_map으로 나눠 실행한다.
  마지막 1/N 스칼라 곱도 원소별로 병렬 실행한다.
"""

import logging
from functools import partial

from py_ecc import optimized_bn128 as bn128

from zkp.kzg.errors import InvalidDomainSize, LengthMismatch
from zkp.kzg.field import (
    FR, TWO_ADICITY, Z1_JACOBIAN,
    get_root_of_unity, is_supported_domain_size,
)
from zkp.kzg.parallel import parallel_map

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────
# 필드 FFT (재귀)
# ─────────────────────────────────────────────────────────────────────

def _fft(values, omega):
    """Cooley-Tukey radix-2 FFT.

    알고리즘:
        1. n=1이면 그대로 반환
        2. 짝수/홀수 인덱스로 분리
        3. 재귀 호출: FFT(even, ω²), FFT(odd, ω²)
        4. 버터플라이 결합: y[k] = even[k] + ω^k · odd[k]
                           y[k+n/2] = even[k] - ω^k · odd[k]
    """
    n = len(values)
    if n == 1:
        return [values[0]]

    omega_sq = omega * omega
    even_vals = _fft(values[0::2], omega_sq)
    odd_vals = _fft(values[1::2], omega_sq)

    half = n // 2
    result = [None] * n
    omega_k = FR(1)
    for k in range(half):
        t = odd_vals[k] * omega_k
        result[k] = even_vals[k] + t
        result[k + half] = even_vals[k] - t
        omega_k = omega_k * omega
    return result


# ─────────────────────────────────────────────────────────────────────
# 그룹 FFT (반복, 단계별 병렬)
# ─────────────────────────────────────────────────────────────────────

def _g1_scale(p, w):
    w = int(w)
    if w == 1:
        return p
    return bn128.multiply(p, w)


def _g1_butterfly(triple):
    """(u, v, w) → (u + w·v, u - w·v)"""
    u, v, w = triple
    t = _g1_scale(v, w)
    return bn128.add(u, t), bn128.add(u, bn128.neg(t))


def _bit_reversed(values):
    n = len(values)
    result = list(values)
    j = 0
    for i in range(1, n):
        bit = n >> 1
        while j & bit:
            j ^= bit
            bit >>= 1
        j ^= bit
        if i < j:
            result[i], result[j] = result[j], result[i]
    return result


def _fft_group(points, omega, workers):
    """야코비안 G1 점 벡터에 대한 반복 radix-2 FFT. 출력은 자연 순서."""
    n = len(points)
    values = _bit_reversed(points)
    half = 1
    while half < n:
        w_step = omega ** (n // (2 * half))
        twiddles = [FR(1)]
        for _ in range(1, half):
            twiddles.append(twiddles[-1] * w_step)

        triples = []
        for start in range(0, n, 2 * half):
            for j in range(half):
                triples.append((values[start + j], values[start + j + half], twiddles[j]))
        outputs = iter(parallel_map(_g1_butterfly, triples, workers=workers))

        for start in range(0, n, 2 * half):
            for j in range(half):
                values[start + j], values[start + j + half] = next(outputs)
        half *= 2
    return values


# ─────────────────────────────────────────────────────────────────────
# EvaluationDomain
# ─────────────────────────────────────────────────────────────────────

class EvaluationDomain:
    """크기 size의 radix-2 평가 도메인.

    속성:
        size: 도메인 크기 N
        omega: N차 원시 단위근 ω
        omega_inv: ω^{-1}
        size_inv: 1/N

    Raises:
        InvalidDomainSize: size가 2의 거듭제곱이 아니거나 2^28을 초과할 때

    예시:
        >>> domain = EvaluationDomain(4)
        >>> evals = domain.fft([FR(1), FR(2)])   # 길이 4로 0-패딩 후 변환
        >>> domain.ifft(evals)                    # [1, 2, 0, 0]
    """

    def __init__(self, size):
        if not is_supported_domain_size(size):
            raise InvalidDomainSize(size, 1 << TWO_ADICITY)
        self.size = size
        self.omega = get_root_of_unity(size)
        self.omega_inv = FR(1) / self.omega
        self.size_inv = FR(1) / FR(size)

    def __repr__(self):
        return f"EvaluationDomain(size={self.size})"

    def _padded(self, values, zero):
        values = list(values)
        if len(values) > self.size:
            raise LengthMismatch("FFT 입력", self.size, len(values))
        return values + [zero] * (self.size - len(values))

    def elements(self):
        """[1, ω, ω², ..., ω^(N-1)]"""
        points = []
        current = FR(1)
        for _ in range(self.size):
            points.append(current)
            current = current * self.omega
        return points

    def fft(self, coeffs):
        """계수 → 평가값. 입력이 N보다 짧으면 0으로 패딩한다."""
        values = [c if isinstance(c, FR) else FR(c) for c in self._padded(coeffs, FR(0))]
        return _fft(values, self.omega)

    def ifft(self, evals):
        """평가값 → 계수.

        F^{-1} = (1/N) · F(ω^{-1}): 역 단위근으로 FFT를 수행한 후 N으로 나눈다.
        """
        values = [e if isinstance(e, FR) else FR(e) for e in self._padded(evals, FR(0))]
        coeffs = _fft(values, self.omega_inv)
        return [c * self.size_inv for c in coeffs]

    def fft_group(self, points, workers=None):
        """야코비안 G1 점 벡터에 대한 FFT."""
        values = self._padded(points, Z1_JACOBIAN)
        return _fft_group(values, self.omega, workers)

    def ifft_group(self, points, workers=None):
        """야코비안 G1 점 벡터에 대한 IFFT (단항식 SRS → Lagrange SRS).

        Args:
            points: 야코비안 G1 점 리스트 (N보다 짧으면 항등원으로 패딩)
            workers: 단계별 버터플라이와 1/N 스케일링의 최대 워커 수
        """
        values = self._padded(points, Z1_JACOBIAN)
        logger.debug("group IFFT over %d points", self.size)
        transformed = _fft_group(values, self.omega_inv, workers)
        return parallel_map(partial(_g1_scale, w=self.size_inv), transformed, workers=workers)
