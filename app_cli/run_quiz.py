from __future__ import annotations
import asyncio, logging, sys, time, uuid
from riasec_core.config import LOG_LEVEL, PASS_VALUE
from riasec_core.engine import AssessmentService
from riasec_core.errors import PipelineError
from riasec_core.question_bank import LETTER_NAMES
from riasec_core.storage import AssessmentStore
def ask(item) -> str:
    print(f"\n{item.question_id}. {item.prompt}")
    for opt in item.options: print(f"  [{opt.id}] {opt.description}")
    valid = {opt.id for opt in item.options}
    while True:
        v = input(f"Your choice ({'/'.join(sorted(valid))} or {PASS_VALUE}): ").strip().lower()
        if v in valid or v == PASS_VALUE: return v
        print("Enter one of the option ids.")
def main(argv=None):
    logging.basicConfig(level=LOG_LEVEL, format="[%(levelname)s] %(message)s")
    args = list(sys.argv[1:] if argv is None else argv)
    user_id = args[0] if args else f"cli-{uuid.uuid4().hex[:8]}"
    service = AssessmentService(AssessmentStore())
    print(f"RIASEC Interest Quiz ({len(service.items)} items) for {user_id}")
    answers, times = {}, {}
    for item in service.items:
        t0 = time.perf_counter(); answers[str(item.id)] = ask(item); times[str(item.id)] = time.perf_counter() - t0
    try:
        res = asyncio.run(service.submit(user_id, answers, times))
    except PipelineError as exc:
        print(f"Submission failed: {exc} [{exc.code}]"); return 1
    profile = res.user.get("riasec_profile") or ""
    scores = res.user.get("scores") or {}
    print(f"\nProfile: {profile}")
    for letter in profile: print(f"  {letter} {LETTER_NAMES[letter]:<14}{scores.get(letter, 0):3d}")
    print("\nRecommended majors:")
    for rec in res.recommendations: print(f"  {rec['rank']:2d}. {rec['major_name']}  ({rec['score']:.2f})")
    return 0
if __name__ == "__main__": raise SystemExit(main())
