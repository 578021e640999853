"""
KZG 프로토콜 설정
=================

Config는 프로토콜 크기(log_n)와 병렬 워커 수를 담는다. 생성 후 변경할 수 없다.

  n     = 2^log_n   (위트니스 개수)
  two_n = 2n        (FFT 도메인 크기, SRS 길이)

실행 환경 기본값은 환경 변수로 덮어쓸 수 있다:
  KZG_WORKERS             병렬 워커 수 (기본값: CPU 개수)
  KZG_WINDOW_SIZE         τ 거듭제곱 윈도우 크기 (기본값: 256)
  KZG_SEQUENTIAL_POWERS   이 개수 이하이면 τ 거듭제곱을 순차 계산 (기본값: 1024)
  KZG_PARALLEL_MIN_ITEMS  이 개수 미만의 map은 프로세스 풀 없이 실행 (기본값: 512)
  KZG_PARALLEL_MIN_FIELD_ITEMS  해시/아다마르 곱 map의 같은 기준 (기본값: 65536)
"""

import os
from dataclasses import dataclass, field

# 운영 크기: n = 2^17
PRODUCTION_LOG_N = 17

# 테스트 크기: n = 2^10 = 1024
TEST_LOG_N = 10

DEFAULT_WINDOW_SIZE = int(os.getenv("KZG_WINDOW_SIZE", 256))
SEQUENTIAL_POWERS_THRESHOLD = int(os.getenv("KZG_SEQUENTIAL_POWERS", 1024))
PARALLEL_MIN_ITEMS = int(os.getenv("KZG_PARALLEL_MIN_ITEMS", 512))

# 해시, 아다마르 곱처럼 원소당 필드 연산이 몇 번뿐인 map의 기준
PARALLEL_MIN_FIELD_ITEMS = int(os.getenv("KZG_PARALLEL_MIN_FIELD_ITEMS", 1 << 16))


def default_workers():
    """KZG_WORKERS 환경 변수, 없으면 CPU 개수."""
    env = os.getenv("KZG_WORKERS")
    if env:
        return max(1, int(env))
    return os.cpu_count() or 1


@dataclass(frozen=True)
class Config:
    """프로토콜 설정.

    속성:
        log_n: 위트니스 개수의 로그 (양의 정수)
        workers: 병렬 구간의 최대 워커 수
    """
    log_n: int
    workers: int = field(default_factory=default_workers)

    def __post_init__(self):
        if isinstance(self.log_n, bool) or not isinstance(self.log_n, int) or self.log_n < 1:
            raise ValueError(f"log_n은 양의 정수여야 합니다: {self.log_n!r}")
        if not isinstance(self.workers, int) or self.workers < 1:
            raise ValueError(f"workers는 1 이상이어야 합니다: {self.workers!r}")

    @property
    def n(self):
        return 1 << self.log_n

    @property
    def two_n(self):
        return 2 * self.n

    @classmethod
    def production(cls, **kwargs):
        return cls(PRODUCTION_LOG_N, **kwargs)

    @classmethod
    def test(cls, **kwargs):
        return cls(TEST_LOG_N, **kwargs)
