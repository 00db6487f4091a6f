"""
Markdown documents produced around a release: the pull request body, the
release notes template and the post-release report.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


def pr_body(new_version: str, current_version: str, bump: str, tag_prefix: str = "v") -> str:
    tag = f"{tag_prefix}{new_version}"
    return f"""## Release {new_version}

This PR prepares the release for version {new_version}.

### Changes
- Version bump: {bump} ({current_version} → {new_version})
- Updated CHANGELOG.md with new version section
- Updated project files with new version

### Pre-Release Checklist
- [ ] All tests pass
- [ ] CHANGELOG.md is updated with release notes
- [ ] Version numbers are correct in all files
- [ ] Documentation is up to date
- [ ] Security scan passes
- [ ] Performance tests pass

### Release Process
1. Review and merge this PR
2. Create release tag: `git tag -a {tag} -m "Release {new_version}"`
3. Push tag: `git push origin {tag}`
4. GitHub Actions will automatically:
   - Build and test the release
   - Deploy to TestFlight
   - Create GitHub release
   - Send notifications

### Rollback Plan
If issues are discovered after release:
1. Stop distribution in App Store Connect
2. Revert to previous version: `git revert {tag}`
3. Deploy hotfix if necessary

**Ready for review!** 🚀"""


def release_notes(new_version: str, current_version: str, tag_prefix: str = "v") -> str:
    bullets = [
        "✨ Features",
        "🐛 Bug Fixes",
        "🔒 Security",
        "📱 Platform Updates",
        "🏗️ Under the Hood",
    ]
    sections = "\n".join(f"### {title}\n-\n" for title in bullets)
    previous = f"{tag_prefix}{current_version}"
    current = f"{tag_prefix}{new_version}"
    return f"""# Release Notes - Version {new_version}

## What's New

{sections}
## Installation

### App Store
Download from the [App Store](https://apps.apple.com/app/your-app-id)

### TestFlight
Join the beta program: [TestFlight Link](https://testflight.apple.com/join/your-testflight-code)

## Support

If you encounter any issues:
- Check our [FAQ](README.md#faq)
- Report bugs through [GitHub Issues](https://github.com/your-username/your-repo/issues)
- Contact support: support@yourcompany.com

## What's Next

Coming in future releases:
-

---

**Full Changelog**: [{previous}...{current}](https://github.com/your-username/your-repo/compare/{previous}...{current})
"""


@dataclass
class ReleaseReportData:
    """Facts gathered from git and gh for the post-release report."""

    version: str
    tag: str
    previous_tag: Optional[str] = None
    release_commit: str = ""
    total_commits: int = 0
    contributors: int = 0
    commits: List[str] = field(default_factory=list)
    files_changed: List[str] = field(default_factory=list)
    build_status: str = "Unknown"
    test_status: str = "Unknown"
    swift_lines: Optional[int] = None
    swift_files: Optional[int] = None
    generated_at: datetime = field(default_factory=datetime.now)


def _or_na(value: Optional[int]) -> str:
    return "N/A" if value is None else str(value)


def release_report(data: ReleaseReportData) -> str:
    stamp = data.generated_at.strftime("%a %b %d %H:%M:%S %Y")
    commits = "\n".join(data.commits) or "Recent commits:"
    files = "\n".join(data.files_changed[:20]) or "File changes not available"
    return f"""# Release Report - Version {data.version}

**Release Date:** {stamp}
**Release Tag:** {data.tag}
**Branch:** main

## Release Summary

### Version Information
- Previous Version: {data.previous_tag or "N/A"}
- Current Version: {data.version}
- Release Tag: {data.tag}

### Git Information
- Release Commit: {data.release_commit}
- Total Commits: {data.total_commits}
- Contributors: {data.contributors}

## Changes Since Last Release

### Commits
{commits}

### Files Changed
{files}

## Deployment Status

### Automated Deployments
- [ ] GitHub Release Created
- [ ] TestFlight Upload (iOS)
- [ ] TestFlight Upload (macOS)
- [ ] App Store Submission
- [ ] Documentation Updated

### Manual Verification Required
- [ ] TestFlight builds are processing correctly
- [ ] App Store Connect metadata is accurate
- [ ] Release notes are published
- [ ] Team notifications sent
- [ ] Customer communication sent (if applicable)

## Quality Metrics

### Build Information
- Build Status: {data.build_status}
- Test Results: {data.test_status}

### Code Quality
- Total Lines of Code: {_or_na(data.swift_lines)}
- Swift Files: {_or_na(data.swift_files)}

## Post-Release Tasks

### Completed ✅
- [x] Release tag created and pushed
- [x] Main branch updated
- [x] Release branch cleaned up
- [x] Develop branch updated (if exists)

### Pending Actions 📋
- [ ] Monitor crash reports and user feedback
- [ ] Update documentation and tutorials
- [ ] Announce release on social media
- [ ] Update website with new features
- [ ] Plan next release cycle

## Issues and Resolutions

### Known Issues
- None reported at release time

### Rollback Plan
If critical issues are discovered:
1. Remove app from sale in App Store Connect
2. Create hotfix branch: `git checkout -b hotfix/{data.version}.1 {data.tag}`
3. Apply critical fixes
4. Deploy hotfix following emergency release process

## Next Release

### Planned Features
- Review backlog for next release
- Schedule feature planning meeting
- Update roadmap based on release feedback

### Timeline
- Next release target: [Date to be determined]
- Feature freeze: [Date to be determined]
- Beta testing period: [Duration to be determined]

---

**Generated:** {stamp}
**Report Version:** 1.0
"""
