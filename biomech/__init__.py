"""biomech: 생체역학 시뮬레이션 코어.

구성 재료 모델(Cauchy 응력 + 접선 강성)과 강체 관절 결합(평면 관절)을 제공한다.
"""

__version__ = "0.3.0"
