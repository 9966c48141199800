# validate.py - End-to-end scenarios for the Access Log Viewer
# Drives cli.py in subprocesses against a fixed reference time
import datetime
import json
import os
import shutil
import subprocess
import sys
import tempfile

ROOT = os.path.dirname(os.path.abspath(__file__))
CLI = os.path.join(ROOT, "cli.py")
NOW = int(datetime.datetime(2024, 3, 15, 14, 30,
                            tzinfo=datetime.timezone.utc).timestamp() * 1000)
DAY = 24 * 3600 * 1000
PC = 0
FC = 0


def rc(args):
    r = subprocess.run(
        [sys.executable, CLI] + args,
        capture_output=True, text=True, cwd=ROOT
    )
    return r.returncode, r.stdout.strip(), r.stderr.strip()


def ck(a, e):
    if e in a:
        return True, ""
    return False, "want %r in %r" % (e, a)


def ckn(a, e):
    if e not in a:
        return True, ""
    return False, "unwanted %r in %r" % (e, a)


def nzc(c):
    if c != 0:
        return True, ""
    return False, "exit 0, expected nonzero"


def rep(sid, desc, ok, diag=""):
    global PC, FC
    if ok:
        PC += 1
    else:
        FC += 1
    tag = "[PASS]" if ok else "[FAIL]"
    print("  %s %s: %s" % (tag, sid, desc))
    if not ok and diag:
        for ln in diag.strip().split("\n"):
            print("         " + ln)


def _a(p, d, ok, m, prefix=""):
    if ok:
        return p, d
    return False, d + [prefix + m if prefix else m]


class TL:
    def __init__(self):
        self.d = None

    def __enter__(self):
        self.d = tempfile.mkdtemp(prefix="al_")
        return self

    def __exit__(self, *a):
        if self.d and os.path.exists(self.d):
            shutil.rmtree(self.d, ignore_errors=True)

    @property
    def lf(self):
        return os.path.join(self.d, "log.json")

    @property
    def af(self):
        return os.path.join(self.d, "audit.log")

    def rec(self, secret, event, t):
        return rc(["record", secret, event, "--time", str(t),
                   "--log-file", self.lf])

    def show(self, secret, events="resume", tz="UTC"):
        return rc(["show", secret, "--now", str(NOW), "--events", events,
                   "--timezone", tz, "--log-file", self.lf,
                   "--audit-file", self.af])

    def alog(self, last=None):
        cmd = ["audit-log", "--audit-file", self.af]
        if last:
            cmd += ["--last", str(last)]
        return rc(cmd)


def s1():
    with TL() as v:
        d, p = [], True
        v.rec("email", "viewed", NOW - 30000)
        c, o, e = v.show("email")
        p, d = _a(p, d, *ck(o, "Access log for email"))
        p, d = _a(p, d, *ck(o, "Viewed less than a minute ago"))
        rep("1", "Entry 30 seconds old uses the seconds text", p, "\n".join(d))


def s2():
    with TL() as v:
        d, p = [], True
        v.rec("email", "changed", NOW - 125000)
        c, o, e = v.show("email")
        p, d = _a(p, d, *ck(o, "Changed 2 minutes ago"))
        rep("2", "Minutes are floored", p, "\n".join(d))


def s3():
    with TL() as v:
        d, p = [], True
        v.rec("email", "exported", NOW - 7200000)
        c, o, e = v.show("email")
        p, d = _a(p, d, *ck(o, "Exported today at 12:30"))
        rep("3", "Two hours ago on the same day is today", p, "\n".join(d))


def s4():
    with TL() as v:
        d, p = [], True
        midnight = NOW - (14 * 3600 + 30 * 60) * 1000
        v.rec("email", "synced", midnight)
        v.rec("email", "created", midnight - DAY)
        c, o, e = v.show("email")
        p, d = _a(p, d, *ck(o, "Synced yesterday at 00:00"))
        p, d = _a(p, d, *ck(o, "Created on 2024-03-14 at 00:00"))
        p, d = _a(p, d, *ckn(o, "today"))
        rep("4", "Midnight ties fall to the earlier day", p, "\n".join(d))


def s5():
    with TL() as v:
        d, p = [], True
        v.rec("email", "created", NOW - 3 * DAY)
        v.rec("email", "viewed", NOW - 60000)
        c, o, e = v.show("email")
        lines = o.splitlines()
        ok = len(lines) == 3 and "Viewed" in lines[1] and "Created" in lines[2]
        p, d = _a(p, d, ok, "rows not newest first: %r" % lines)
        rep("5", "Rows are shown newest first", p, "\n".join(d))


def s6():
    with TL() as v:
        d, p = [], True
        v.rec("email", "viewed", NOW + 3 * DAY)
        c, o, e = v.show("email")
        p, d = _a(p, d, *ck(o, "Viewed less than a minute ago"))
        rep("6", "Future timestamps do not fail", p, "\n".join(d))


def s7():
    with TL() as v:
        d, p = [], True
        with open(v.lf, "w") as f:
            json.dump({"secrets": {"email": {"access_log": [
                {"type": "archived", "time": NOW - 5000}]}}}, f)
        c, o, e = v.show("email")
        p, d = _a(p, d, *ck(o, "? less than a minute ago"))
        rep("7", "Unknown event types use a placeholder verb", p, "\n".join(d))


def s8():
    with TL() as v:
        d, p = [], True
        v.rec("email", "viewed", NOW - 5000)
        c, o, e = v.show("email", "resume,resume")
        p, d = _a(p, d, *ck(o, "Enter the master password"))
        p, d = _a(p, d, *ck(o, "Result: canceled"))
        rep("8", "Second resume without back closes the view", p, "\n".join(d))


def s9():
    with TL() as v:
        d, p = [], True
        v.rec("email", "viewed", NOW - 5000)
        c, o, e = v.show("email", "resume,back")
        p, d = _a(p, d, *ck(o, "Result: ok"))
        p, d = _a(p, d, *ckn(o, "master password"))
        rep("9", "Back reports a trusted result to the parent", p, "\n".join(d))


def s10():
    with TL() as v:
        d, p = [], True
        v.rec("email", "viewed", NOW - 5000)
        v.show("email", "resume,resume")
        c, o, e = v.alog()
        for kw in ["open", "resume | allowed", "resume | denied"]:
            p, d = _a(p, d, *ck(o, kw))
        rep("10", "View decisions are audited", p, "\n".join(d))


def s11():
    with TL() as v:
        d, p = [], True
        c, o, e = v.show("ghost")
        p, d = _a(p, d, *nzc(c))
        p, d = _a(p, d, *ck(e, "Error: Access log file not found"))
        v.rec("email", "viewed", NOW)
        c, o, e = v.show("ghost")
        p, d = _a(p, d, *nzc(c))
        p, d = _a(p, d, *ck(e, "Error: No access log for secret 'ghost'"))
        rep("11", "Missing log file and secret are errors", p, "\n".join(d))


def s12():
    with TL() as v:
        d, p = [], True
        v.rec("email", "viewed", NOW - 2 * 3600 * 1000)
        c, o, e = v.show("email", tz="Asia/Tokyo")
        p, d = _a(p, d, *ck(o, "Viewed today at 21:30"))
        c, o, e = v.show("email", tz="Not/AZone")
        p, d = _a(p, d, *nzc(c))
        p, d = _a(p, d, *ck(e, "Error: Invalid timezone"))
        rep("12", "Day boundaries follow the chosen time zone", p, "\n".join(d))


def main():
    print("=" * 70)
    print("Access Log Viewer -- Validation Suite")
    print("=" * 70)
    print()
    ts = [s1, s2, s3, s4, s5, s6, s7, s8, s9, s10, s11, s12]
    for f in ts:
        try:
            f()
        except Exception as x:
            rep(f.__name__[1:], "EXCEPTION: %s" % x, False, str(x))
    print()
    print("=" * 70)
    print("Results: %d/%d passed, %d failed" % (PC, PC + FC, FC))
    print("=" * 70)
    sys.exit(1 if FC > 0 else 0)


if __name__ == "__main__":
    main()
