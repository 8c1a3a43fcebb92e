# Ability id returned by a rule-set that has nothing to substitute.
NO_ACTION = 0

# Effect sources the game does not report reliably.
UNKNOWN_SOURCE_ID = 0
INVALID_OBJECT_ID = 0xE000_0000

# Rule-set ids below this value are always enabled and never shown in settings.
ALWAYS_ENABLED_BELOW = 100

# Seconds of global cooldown that must remain for an off-GCD action to be woven.
DEFAULT_WEAVE_TIME = 0.7

# Bumped whenever the persisted configuration layout changes.
CONFIG_VERSION = 1

# Settings groups whose names start with this prefix are listed after the jobs.
ROLE_GROUP_PREFIX = "Disciple of the "

JOB_NAMES: dict[int, str] = {
    0: "Disciple of the War",
    1: "Gladiator",
    3: "Marauder",
    19: "Paladin",
    21: "Warrior",
}


def class_for_job(job_id: int) -> int:
    """Return the base class that shares ``job_id``'s skill tree."""

    if 19 <= job_id <= 25:
        return job_id - 18
    if job_id in (27, 28):
        return 26
    if job_id == 30:
        return 29
    return job_id


def job_matches(rule_job: int, actor_job: int) -> bool:
    return rule_job == actor_job or class_for_job(rule_job) == actor_job


def job_name(job_id: int) -> str:
    return JOB_NAMES.get(job_id, f"Job {job_id}")
