from __future__ import annotations

from typing import Any

KEYED_COLLECTIONS: tuple[str, ...] = (
    "members",
    "roles",
    "news",
    "leaders",
    "announcements",
    "departments",
    "department_interests",
    "contacts",
    "donations",
    "donation_projects",
    "verses",
    "reflections",
    "quizzes",
    "quiz_results",
)

LOGS = "logs"


def initial_dataset() -> dict[str, Any]:
    """
    The deterministic dataset a fresh store starts from.

    Returns a new structure on every call; callers may mutate it freely.
    """
    collections: dict[str, list[dict[str, Any]]] = {name: [] for name in KEYED_COLLECTIONS}

    collections["members"] = [
        {
            "id": "it-admin",
            "fullName": "IT Administrator",
            "email": "it@test.com",
            "password": "password123",
            "phone": "+250 788 000 000",
            "role": "it",
            "program": "Software Engineering & IT",
            "level": "Expert",
            "diocese": "Kigali",
            "department": "IT & Infrastructure",
            "createdAt": "1997-01-01",
        },
        {
            "id": "u1",
            "fullName": "Kevin Accountant",
            "email": "finance@test.com",
            "password": "password123",
            "phone": "+250 788 000 001",
            "role": "accountant",
            "program": "Economics",
            "level": "Level 4",
            "diocese": "Kigali",
            "department": "Social Affairs",
            "createdAt": "2023-01-10",
        },
        {
            "id": "u2",
            "fullName": "Marie Secretary",
            "email": "secretary@test.com",
            "password": "password123",
            "phone": "+250 788 000 002",
            "role": "secretary",
            "program": "Management",
            "level": "Level 3",
            "diocese": "Butare",
            "department": "Media",
            "createdAt": "2023-05-15",
        },
        {
            "id": "u3",
            "fullName": "Jean Member",
            "email": "member@test.com",
            "password": "password123",
            "phone": "+250 788 000 003",
            "role": "member",
            "program": "Architecture",
            "level": "Level 2",
            "diocese": "Gahini",
            "department": "Evangelisation",
            "createdAt": "2024-01-01",
        },
    ]
    collections["news"] = [
        {
            "id": "1",
            "title": "Grand Fellowship Service 2024",
            "content": "Join us for a spirit-filled mass fellowship this Sunday at the Student Center.",
            "category": "event",
            "mediaUrl": "https://images.unsplash.com/photo-1523580494863-6f3031224c94?q=80&w=2070",
            "mediaType": "image",
            "author": "Admin",
            "date": "2024-03-20",
        },
    ]
    collections["leaders"] = [
        {
            "id": "l1",
            "name": "Yves Mbaraga Igiraneza",
            "position": "Representative",
            "phone": "+250 787 000 100",
            "academicYear": "2024-2025",
            "image": "https://images.unsplash.com/photo-1506794778202-cad84cf45f1d?w=800",
            "type": "Executive",
        },
    ]
    collections["announcements"] = [
        {
            "id": "a1",
            "title": "Mid-week Prayer Resumption",
            "content": "Weekly Wednesday prayers resume at the main chapel starting 6 PM.",
            "date": "2024-03-24",
            "status": "Notice",
            "color": "bg-cyan-500",
            "isActive": True,
        },
    ]
    collections["departments"] = [
        {
            "id": "1",
            "name": "Call on Jesus",
            "description": "The heartbeat of revival and corporate prayer.",
            "icon": "Flame",
            "category": "Spiritual Pillar",
            "image": "https://images.unsplash.com/photo-1544427928-c49cdfebf193?q=80&w=2000",
            "details": "Call on Jesus is dedicated to igniting spiritual revival through focused prayer.",
            "activities": ["Weekly Revival Nights", "Prayer Retreats", "Fasting Fellowships"],
        },
    ]
    collections["donations"] = [
        {
            "id": "d1",
            "donorName": "Post RASA Alumni",
            "email": "alumni@test.com",
            "phone": "+250 788 000 001",
            "amount": 50000,
            "currency": "RWF",
            "category": "Project-based",
            "project": "New Sound System",
            "date": "2024-03-10",
            "status": "Completed",
            "transactionId": "TX12345678",
        },
    ]
    collections["donation_projects"] = [
        {
            "id": "p1",
            "title": "New Sound System",
            "description": "Upgrading our chapel speakers and microphones.",
            "goal": 2000000,
            "raised": 750000,
            "image": "https://images.unsplash.com/photo-1520523839897-bd0b52f945a0",
            "isActive": True,
        },
    ]

    singletons: dict[str, dict[str, Any]] = {
        "home_config": {
            "heroTitle": "Showing Christ to Academicians",
            "heroSubtitle": "A journey of faith, service, and excellence at UR Nyarugenge.",
            "heroImageUrl": "https://images.unsplash.com/photo-1523580494863-6f3031224c94?q=80&w=2070",
            "motto": "Est. 1997 - RASA UR-Nyarugenge",
            "aboutTitle": "Our Sacred Vision",
            "aboutText": "RASA UR-Nyarugenge is a family of students united by the Great Commission.",
            "aboutScripture": "Until we all reach unity in the faith...",
            "aboutScriptureRef": "EPHESIANS 4:13",
            "stat1Value": "1.2k+",
            "stat1Label": "ACTIVE MEMBERS",
            "stat2Value": "10+",
            "stat2Label": "MINISTRIES",
        },
        "about_config": {
            "heroTitle": "Our Eternal Genesis",
            "heroSubtitle": "A legacy of faith, resilience, and spiritual awakening.",
            "historyTitle": "A Journey Through Fire & Grace",
            "historyContent": "The Rwanda Anglican Students Association (RASA) was born in 1997 at the former UNR Butare.",
            "visionTitle": "Our Vision",
            "visionContent": "To become a vibrant spiritual hub...",
            "missionTitle": "Our Mission",
            "missionContent": "To proclaim the Gospel of Jesus Christ among academicians...",
            "values": [
                {"id": "v1", "title": "Salvation", "description": "Total reliance on grace.", "icon": "Cross"},
            ],
            "timeline": [
                {"id": "t1", "year": "1997", "title": "The Genesis", "description": "RASA founded at UNR Butare campus."},
            ],
        },
        "footer_config": {
            "about": "Rwanda Anglican Students Association, UR Nyarugenge chapter.",
            "address": "UR Nyarugenge Campus, Kigali",
            "email": "info@rasa.test",
            "phone": "+250 788 000 010",
            "socialLinks": {},
        },
    }

    return {"collections": collections, "singletons": singletons, "logs": [], "otps": []}
