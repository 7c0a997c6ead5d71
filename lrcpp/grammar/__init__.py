"""문법 모델과 산출물 로더."""
