import copy
import logging
import random
from typing import Optional

from learn_cricket.engine.adaptive import Difficulty, SupplyRequest

logger = logging.getLogger(__name__)


def _q(qid, topic, difficulty, prompt, options, answer, explanation):
    return {
        "id": qid,
        "topic": topic,
        "difficulty": difficulty,
        "prompt": prompt,
        "options": options,
        "correct_option_index": answer,
        "explanation": explanation,
    }


SEED_QUESTIONS = [
    # basic rules
    _q("br-1", "basic rules", "easy",
       "How many players does each side have on the field in a standard match?",
       ["9", "10", "11", "12"], 2,
       "Each team fields eleven players."),
    _q("br-2", "basic rules", "easy",
       "How many legal deliveries make up an over?",
       ["4", "5", "6", "8"], 2,
       "An over is six legal deliveries bowled from one end."),
    _q("br-3", "basic rules", "medium",
       "Which of these is NOT a way for a batter to be dismissed?",
       ["Leg before wicket", "Stumped", "Hit wicket", "Double bounce"], 3,
       "A ball bouncing twice before reaching the batter is a no ball, not a dismissal."),

    # field positions
    _q("fp-1", "field positions", "easy",
       "Which fielder stands directly behind the stumps at the batter's end?",
       ["Slip", "Wicket-keeper", "Gully", "Silly point"], 1,
       "The wicket-keeper crouches behind the stumps to take deliveries the batter misses."),
    _q("fp-2", "field positions", "medium",
       "Which fielding position is square of the wicket on the off side?",
       ["Point", "Mid-wicket", "Fine leg", "Long on"], 0,
       "Point fields square on the off side; mid-wicket is its leg side counterpart."),
    _q("fp-3", "field positions", "hard",
       "Where does third man field?",
       ["Behind square on the off side, near the boundary",
        "In front of the batter on the leg side",
        "Directly behind the bowler",
        "Close in on the leg side"], 0,
       "Third man guards the area behind the slips and gully down to the boundary."),

    # batting techniques
    _q("bt-1", "batting techniques", "medium",
       "Which shot is played with a horizontal bat to a short, wide ball, sending it square on the off side?",
       ["Cover drive", "Cut", "Sweep", "Leg glance"], 1,
       "The cut is a cross-batted shot to short, wide deliveries outside off stump."),
    _q("bt-2", "batting techniques", "medium",
       "Which shot is usually played on one knee, sweeping a spinner's delivery towards the leg side?",
       ["Sweep", "Pull", "Straight drive", "Late cut"], 0,
       "The sweep is a low, cross-batted stroke commonly used against spin."),
    _q("bt-3", "batting techniques", "hard",
       "What is a switch hit?",
       ["Changing stance and grip to bat the other way round as the bowler delivers",
        "A back-foot shot played straight down the ground",
        "Swapping strike after taking a single",
        "Hitting the ball twice to protect the stumps"], 0,
       "In a switch hit a right-hander effectively bats left-handed, or vice versa, mid-delivery."),

    # bowling types
    _q("bw-1", "bowling types", "easy",
       "Which type of bowler relies mainly on speed?",
       ["Off spinner", "Leg spinner", "Fast bowler", "Left-arm orthodox"], 2,
       "Fast bowlers beat the batter with pace and bounce rather than turn."),
    _q("bw-2", "bowling types", "medium",
       "What is a googly?",
       ["A leg spinner's delivery that turns the opposite way, like an off break",
        "A fast full toss",
        "A bouncer aimed at the body",
        "A ball that swings late into the batter"], 0,
       "The googly is the leg spinner's wrong'un, turning into a right-hander instead of away."),
    _q("bw-3", "bowling types", "hard",
       "What does reverse swing depend on most?",
       ["An older ball with one side rough and the other shiny",
        "A brand-new ball",
        "Bowling around the wicket",
        "A damp pitch"], 0,
       "Reverse swing appears once the ball is worn, moving towards the shiny side."),

    # match formats
    _q("mf-1", "match formats", "easy",
       "How many overs per side are bowled in a T20 International?",
       ["10", "20", "40", "50"], 1,
       "Twenty20 cricket gives each side a maximum of twenty overs."),
    _q("mf-2", "match formats", "easy",
       "How many overs per side are there in a One Day International?",
       ["20", "40", "50", "60"], 2,
       "Modern ODIs are fifty overs per side."),
    _q("mf-3", "match formats", "medium",
       "What is the scheduled maximum length of a men's Test match?",
       ["3 days", "4 days", "5 days", "6 days"], 2,
       "Test matches are scheduled over up to five days."),

    # scoring system
    _q("ss-1", "scoring system", "easy",
       "How many runs are scored when the ball clears the boundary without bouncing?",
       ["4", "5", "6", "8"], 2,
       "Clearing the boundary on the full is a six."),
    _q("ss-2", "scoring system", "easy",
       "How many runs are awarded when the ball reaches the boundary after touching the ground?",
       ["2", "4", "5", "6"], 1,
       "A ball that bounces or rolls over the boundary scores four."),
    _q("ss-3", "scoring system", "medium",
       "Which extra is called when the ball passes too far from the batter to be hit with a normal stroke?",
       ["Bye", "Leg bye", "Wide", "No ball"], 2,
       "A wide adds a run to the total and the delivery has to be bowled again."),

    # equipment
    _q("eq-1", "equipment", "easy",
       "What are the bails?",
       ["Two small pieces resting on top of the stumps",
        "The batter's leg guards",
        "The wicket-keeper's gloves",
        "The stitching on the ball"], 0,
       "A wicket is broken when at least one bail is dislodged."),
    _q("eq-2", "equipment", "easy",
       "How many stumps make up one wicket?",
       ["2", "3", "4", "5"], 1,
       "Each wicket is three stumps topped by two bails."),
    _q("eq-3", "equipment", "hard",
       "What is the maximum width of a cricket bat under the Laws?",
       ["4.25 inches (10.8 cm)", "5 inches (12.7 cm)", "3.5 inches (8.9 cm)", "6 inches (15.2 cm)"], 0,
       "The Laws limit the blade to 4.25 inches wide."),

    # cricket terminology
    _q("ct-1", "cricket terminology", "easy",
       "What is a maiden over?",
       ["An over in which no runs are conceded",
        "A bowler's first over of the match",
        "An over in which a wicket falls",
        "An over bowled by a debutant"], 0,
       "A maiden is an over with no runs scored against the bowler."),
    _q("ct-2", "cricket terminology", "medium",
       "What is a yorker?",
       ["A ball pitched at or near the batter's feet",
        "A ball that bounces twice",
        "A slow, looping delivery",
        "A short ball above head height"], 0,
       "The yorker lands at the base of the bat, making it hard to dig out."),
    _q("ct-3", "cricket terminology", "medium",
       "What does it mean when a batter makes a duck?",
       ["They are dismissed without scoring",
        "They hit the ball straight up",
        "They drop a catch",
        "They are run out at the non-striker's end"], 0,
       "A duck is a dismissal for zero."),

    # famous players
    _q("fpl-1", "famous players", "easy",
       "Which batter scored 100 international centuries?",
       ["Sachin Tendulkar", "Brian Lara", "Ricky Ponting", "Jacques Kallis"], 0,
       "Sachin Tendulkar reached his hundredth international hundred in 2012."),
    _q("fpl-2", "famous players", "medium",
       "Whose Test batting average was 99.94?",
       ["Don Bradman", "Garfield Sobers", "Steve Smith", "Wally Hammond"], 0,
       "Sir Donald Bradman finished four runs short of an average of 100."),
    _q("fpl-3", "famous players", "hard",
       "Who took 800 Test wickets, the most in the format's history?",
       ["Shane Warne", "Muttiah Muralitharan", "James Anderson", "Anil Kumble"], 1,
       "Muttiah Muralitharan retired with exactly 800 Test wickets."),

    # cricket history
    _q("ch-1", "cricket history", "easy",
       "Between which two teams is the Ashes contested?",
       ["England and Australia", "India and Pakistan", "England and New Zealand", "Australia and South Africa"], 0,
       "The Ashes rivalry between England and Australia dates back to 1882."),
    _q("ch-2", "cricket history", "medium",
       "Who won the first men's Cricket World Cup in 1975?",
       ["Australia", "England", "West Indies", "India"], 2,
       "West Indies beat Australia in the final at Lord's."),
    _q("ch-3", "cricket history", "hard",
       "In which year was the first official Test match played?",
       ["1844", "1877", "1896", "1900"], 1,
       "Australia played England in Melbourne in March 1877."),
]


class QuestionGenerator:
    """
    Offline question supply backed by the seed bank.

    Requested topic and difficulty are preferences, not filters: the closest
    unissued questions are returned, avoiding recently asked topics when
    anything else is left. Each record is handed out at most once.
    """

    def __init__(self, questions: Optional[list] = None, seed: Optional[int] = None):
        self.rng = random.Random(seed)
        self._bank = [dict(q) for q in (questions if questions is not None else SEED_QUESTIONS)]
        self._issued: set[str] = set()

    @property
    def remaining(self) -> int:
        return sum(1 for q in self._bank if q.get("id") not in self._issued)

    def _rank(self, question: dict, request: SupplyRequest) -> tuple:
        topic = question.get("topic")
        try:
            distance = abs(Difficulty.parse(question.get("difficulty")).rank - request.difficulty.rank)
        except ValueError:
            distance = len(Difficulty)
        return (
            topic in request.exclude_recent_topics,
            request.topic is not None and topic != request.topic,
            distance,
        )

    def generate(self, request: SupplyRequest) -> list[dict]:
        """Pick up to `request.count` unissued questions, best match first"""
        candidates = [q for q in self._bank if q.get("id") not in self._issued]
        self.rng.shuffle(candidates)
        candidates.sort(key=lambda q: self._rank(q, request))

        batch = candidates[:max(0, request.count)]
        for question in batch:
            self._issued.add(question.get("id"))

        logger.debug(
            "Generated %d question(s) for topic=%s difficulty=%s (%d left)",
            len(batch), request.topic, request.difficulty.value, self.remaining,
        )
        return [copy.deepcopy(q) for q in batch]

    async def fetch_questions(self, request: SupplyRequest) -> list[dict]:
        return self.generate(request)
