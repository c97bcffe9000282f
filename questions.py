import json
import logging
from typing import List, Optional

from models import Question

logger = logging.getLogger(__name__)

QUESTIONS = [
    {
        "id": 1,
        "question": "Did you help with chores around the house this year?",
        "options": ["Every day", "Sometimes", "Only when asked twice", "Never"],
        "correctAnswer": "Every day",
    },
    {
        "id": 2,
        "question": "How often did you say please and thank you?",
        "options": ["Always", "Most of the time", "Rarely", "What are those?"],
        "correctAnswer": "Always",
    },
    {
        "id": 3,
        "question": "What do you leave out for Santa on Christmas Eve?",
        "options": ["Milk and cookies", "Carrots for the reindeer", "Nothing", "A list of complaints"],
        "correctAnswer": "Milk and cookies",
    },
    {
        "id": 4,
        "question": "A friend is sad at school. What do you do?",
        "options": ["Cheer them up", "Tell a teacher", "Ignore them", "Laugh at them"],
        "correctAnswer": "Cheer them up",
    },
    {
        "id": 5,
        "question": "How many of Santa's reindeer can you name?",
        "options": ["All nine", "Just Rudolph", "A few", "Santa has reindeer?"],
        "correctAnswer": "All nine",
    },
    {
        "id": 6,
        "question": "Did you share your toys this year?",
        "options": ["Yes, gladly", "If they asked nicely", "Only the broken ones", "No way"],
        "correctAnswer": "Yes, gladly",
    },
    {
        "id": 7,
        "question": "What time did you go to bed on school nights?",
        "options": ["On time", "A little late", "Whenever I wanted", "I don't sleep"],
        "correctAnswer": "On time",
    },
    {
        "id": 8,
        "question": "Where does Santa live?",
        "options": ["The North Pole", "The South Pole", "Lapland", "Next door"],
        "correctAnswer": "The North Pole",
    },
    {
        "id": 9,
        "question": "Did you eat your vegetables?",
        "options": ["All of them", "Most of them", "I hid them", "Fed them to the dog"],
        "correctAnswer": "All of them",
    },
    {
        "id": 10,
        "question": "What is the best gift you can give someone?",
        "options": ["Kindness", "Money", "Socks", "Nothing"],
        "correctAnswer": "Kindness",
    },
]


def load_questions(path: Optional[str] = None) -> List[dict]:
    """Load the quiz questions once at startup.

    With no path the built-in set is used. A file must hold a JSON array of
    question objects; each entry is validated against ``Question``.
    """
    raw = QUESTIONS
    if path:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
        logger.info("Loaded %d questions from %s", len(raw), path)
    return [Question.model_validate(q).model_dump() for q in raw]
