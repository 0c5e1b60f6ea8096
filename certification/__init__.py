"""Certificate assembly and reattempt payment gating for IELTS Pro."""
