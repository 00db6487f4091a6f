import os
from datetime import datetime
from typing import Optional

from repokit.security.checks import ValidationTally

REPORT_NAME_FORMAT = "security-validation-report-%Y%m%d_%H%M%S.md"


def report_filename(when: datetime) -> str:
    return when.strftime(REPORT_NAME_FORMAT)


def render_report(full_name: str, tally: ValidationTally, when: datetime) -> str:
    if tally.failed:
        high = "- Review and address all failed security checks"
    else:
        high = "- All critical security checks passed ✅"
    if tally.warnings:
        medium = "- Consider addressing warning items for enhanced security"
    else:
        medium = "- No warning items found ✅"

    return f"""# Security Validation Report

**Repository:** {full_name}
**Generated:** {when.strftime("%a %b %d %H:%M:%S %Y")}
**Validation Script Version:** 1.0

## Summary

- ✅ Passed: {tally.passed} checks
- ❌ Failed: {tally.failed} checks
- ⚠️ Warnings: {tally.warnings} checks

**Overall Security Score:** {tally.score}% ({tally.label})

## Recommendations

### High Priority (Failed Checks)
{high}

### Medium Priority (Warnings)
{medium}

### Continuous Improvement
- Schedule regular security validation runs
- Monitor security alerts and dependencies
- Keep security policies updated
- Provide security training for team members

## Next Steps

1. Address any failed security checks immediately
2. Review warning items and implement as appropriate
3. Schedule monthly security validation runs
4. Update team on security status

## Resources

- [Repository Security Guide](REPOSITORY_SECURITY_GUIDE.md)
- [GitHub Security Features](https://docs.github.com/en/code-security)
- [Branch Protection Rules](https://docs.github.com/en/repositories/configuring-branches-and-merges-in-your-repository/defining-the-mergeability-of-pull-requests/about-protected-branches)

---
*Generated by repokit validate-security*
"""


def write_report(
    directory: str,
    full_name: str,
    tally: ValidationTally,
    when: Optional[datetime] = None,
) -> str:
    """Write the markdown report into `directory` and return its path."""
    when = when or datetime.now()
    path = os.path.join(directory, report_filename(when))
    with open(path, "w", encoding="utf-8") as f:
        f.write(render_report(full_name, tally, when))
    return path
