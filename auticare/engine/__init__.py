# auticare/engine/__init__.py
from .normalizer import Answer, AnswerValue, normalize
from .scoring import AdjustmentFlags, aggregate, family_history_flag
from .contributors import Contributor, rank
from .fusion import SecondaryPrediction, fuse
from .severity import Severity, SeverityLevel, classify
from .assessment import Fused, QuestionnaireOnly, ScoringResult, amend_with_prediction, reconstruct, score_assessment
from .config import ScoringConfig, build_scoring_config, get_scoring_config
