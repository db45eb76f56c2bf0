REQUIRED_FIELDS = (
    "tone",
    "fillerWords",
    "grammarIssues",
    "relevance",
    "score",
    "suggestions",
    "followUp",
)

KNOWN_TONES = ("confident", "nervous", "unsure", "neutral")

SCORE_MIN = 0
SCORE_MAX = 10
# assume a competent answer when the model gives no usable score
DEFAULT_SCORE = 7

DEFAULT_TONE = "neutral"
DEFAULT_RELEVANCE = "Response addresses the question appropriately"
DEFAULT_SUGGESTIONS = "Continue practicing to improve your interview skills"
DEFAULT_FOLLOW_UP = "Can you provide a specific example to support your answer?"

FEEDBACK_SCHEMA = {
    "tone": "confident|nervous|unsure|neutral",
    "fillerWords": ["word1", "word2"],
    "grammarIssues": ["issue1", "issue2"],
    "relevance": "brief comment on relevance",
    "score": "0-10",
    "suggestions": "concise improvement tips",
    "followUp": "one relevant follow-up question",
}
