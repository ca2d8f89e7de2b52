from datetime import datetime, timedelta, timezone


def utc_now():
    return datetime.now(timezone.utc)


def shifted_iso(moment=None, offset_hours=7):
    """Format ``moment`` shifted by ``offset_hours`` as ``YYYY-MM-DDTHH:MM:SS.mmmZ``.

    The shift is applied to the wall-clock value and the ``Z`` suffix is kept,
    so stored comment timestamps read as local (UTC+7) time.
    """
    moment = moment or utc_now()
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc).replace(tzinfo=None)
    shifted = moment + timedelta(hours=offset_hours)
    return shifted.strftime("%Y-%m-%dT%H:%M:%S.") + f"{shifted.microsecond // 1000:03d}Z"
