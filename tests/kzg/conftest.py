import sys
import os
import random
import pytest

# 프로젝트 루트를 sys.path에 추가
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', '..'))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from zkp.kzg.config import Config
from zkp.kzg.prover import Prover
from zkp.kzg.setup import Setup
from zkp.kzg.verifier import Verifier


# ── 테스트 상수 ──
SMALL_LOG_N = 2      # n = 4, two_n = 8
WITNESS_SEED = 7


@pytest.fixture(scope="session")
def small_config():
    """n = 4, 단일 워커 (프로세스 풀 없이 실행)."""
    return Config(log_n=SMALL_LOG_N, workers=1)


@pytest.fixture(scope="session")
def witness_seed():
    return WITNESS_SEED


@pytest.fixture(scope="session")
def small_setup(small_config):
    return Setup.generate(small_config, rng=random.Random(1234))


@pytest.fixture(scope="session")
def committed(small_setup):
    """(prover, verifier, commitment, evals): 같은 setup을 공유한다."""
    prover = Prover(small_setup)
    verifier = Verifier(small_setup)
    commitment, evals = prover.prove(rng=random.Random(WITNESS_SEED))
    return prover, verifier, commitment, evals
