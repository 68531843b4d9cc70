"""
Simple examples demonstrating the Student Support Engine.
"""

# Example 1: Youth Allowance estimate
print("=" * 60)
print("Example 1: Youth Allowance Estimate")
print("=" * 60)

from studentsupport_engine import (
    ApplicantProfile,
    LivingSituation,
    evaluate,
    get_threshold_table,
)

thresholds = get_threshold_table(2026)

profiles = [
    ApplicantProfile(age=17, study_load_full_time=True),
    ApplicantProfile(age=19, study_load_full_time=True, living_situation=LivingSituation.RENTING,
                     parental_income_annual=90000, siblings_receiving_payments=1),
    ApplicantProfile(age=23, study_load_full_time=True, living_situation=LivingSituation.AWAY,
                     personal_income_fortnightly=700),
]

for profile in profiles:
    result = evaluate(profile, thresholds)
    status = "✓ ELIGIBLE" if result.eligible else "✗ INELIGIBLE"
    print(f"\n  Age {profile.age:2} ({profile.living_situation.value}) -> {status}")
    print(f"    Fortnightly: ${result.final_fortnightly_payment:.2f}  Annual: ${result.annual_payment:,.2f}")
    for step in result.calculation_breakdown:
        print(f"    - {step.step}: {step.description}")
    for reason in result.ineligible_reasons:
        print(f"    ! {reason}")

# Example 2: Rent Assistance on top of the payment
print("\n" + "=" * 60)
print("Example 2: Rent Assistance")
print("=" * 60)

from studentsupport_engine import run_student_support_assessment

assessment = run_student_support_assessment(
    {"age": 19, "studyLoadFullTime": True, "livingSituation": "renting"},
    rent_data={"fortnightly_amount": 400, "rent_type": "private", "household_type": "single"},
)
ra = assessment["rent_assistance"]
print(f"\n  Eligible rent: ${ra['eligible_rent']:.2f}")
print(f"  Rent Assistance: ${ra['rent_assistance_fortnightly']:.2f} (cap ${ra['max_rate']:.2f})")
print(f"  Total fortnightly: ${assessment['total_fortnightly']:.2f}")

# Example 3: ATAR estimate
print("\n" + "=" * 60)
print("Example 3: ATAR Estimate")
print("=" * 60)

from studentsupport_engine import (
    ConversionTable,
    ScalingTable,
    SubjectScoreEntry,
    calculate_atar,
)

scaling = ScalingTable.from_rows([
    (1, 40, 30), (1, 60, 40), (1, 90, 48),
    (2, 30, 25), (2, 70, 42), (2, 95, 49),
    (3, 50, 35), (3, 80, 45),
])
conversion = ConversionTable.from_rows([(200, 50.0), (300, 70.0), (400, 90.0), (480, 99.95)])

subjects = [
    SubjectScoreEntry(1, "Mathematics Advanced", 2, 75),
    SubjectScoreEntry(2, "English Advanced", 2, 80),
    SubjectScoreEntry(3, "Chemistry", 2, 65),
    SubjectScoreEntry(1, "Mathematics Extension 1", 1, 60),
    SubjectScoreEntry(2, "Modern History", 2, 55),
    SubjectScoreEntry(3, "Physics", 2, 70),
]

atar = calculate_atar(subjects, scaling, conversion)
print(f"\n  Aggregate: {atar.aggregate:.2f}  ATAR: {atar.atar}")
for subject in atar.by_subject:
    print(f"    {subject.subject_name:28} scaled {subject.scaled_mark:6.2f}  units counted {subject.units_taken}")

print("\n" + "=" * 60)
print("✓ All examples completed successfully!")
print("=" * 60)
