import asyncio

import pytest

from boardeasy.bookings import BookingStage, BookingWorkflow
from boardeasy.offerings import DepartureWindow, OfferingFilter
from boardeasy.config import Settings
from boardeasy.offerings.service import SyntheticOfferingProvider

from conftest import FakeAuthSession

# Offering 2 costs 700 with price jitter disabled
OFFERING_AT_700 = 2


def fill_passengers(workflow):
    for i in range(len(workflow.roster)):
        workflow.update_passenger(i, "name", f"Passenger {i + 1}")
        workflow.update_passenger(i, "age", "34")
        workflow.update_passenger(i, "gender", "other")


async def advance_to_seats(workflow, criteria):
    await workflow.search(criteria)
    workflow.select_offering(OFFERING_AT_700)
    fill_passengers(workflow)
    assert workflow.continue_to_seats().accepted


async def advance_to_summary(workflow, criteria):
    await advance_to_seats(workflow, criteria)
    for seat in (1, 2, 3):
        workflow.toggle_seat(seat)
    assert workflow.continue_to_summary().accepted


async def test_search_requires_login(ledger, config, criteria):
    auth = FakeAuthSession(authenticated=False)
    workflow = BookingWorkflow(auth, SyntheticOfferingProvider(price_jitter=0), ledger, config)

    result = await workflow.search(criteria)

    assert result.accepted is False
    assert result.login_required is True
    assert auth.redirects == 1
    assert workflow.stage == BookingStage.IDLE
    assert workflow.criteria is None
    assert workflow.offerings == []
    assert workflow.draft is None


async def test_search_reports_form_errors(workflow, criteria):
    result = await workflow.search(criteria.model_copy(update={"destination_name": ""}))

    assert result.accepted is False
    assert result.message == "Destination city is required"
    assert workflow.messages[BookingStage.IDLE] == "Destination city is required"
    assert workflow.stage == BookingStage.IDLE


async def test_search_lists_offerings(workflow, criteria):
    result = await workflow.search(criteria)

    assert result.accepted
    assert workflow.stage == BookingStage.SELECT_BUS
    assert len(workflow.offerings) == 12


async def test_selecting_offering_rechecks_login(workflow, auth, criteria):
    await workflow.search(criteria)
    auth.logout()

    result = workflow.select_offering(1)

    assert result.login_required
    assert auth.redirects == 1
    assert workflow.criteria is None
    assert workflow.stage == BookingStage.IDLE


async def test_selecting_offering_builds_blank_roster(workflow, criteria):
    await workflow.search(criteria)

    result = workflow.select_offering(OFFERING_AT_700)

    assert result.stage == BookingStage.PASSENGER_DETAILS
    assert len(workflow.roster) == 3
    assert all(p.name == "" and p.age is None for p in workflow.roster.passengers)
    assert workflow.seat_map.capacity == 3


async def test_unknown_offering_is_refused(workflow, criteria):
    await workflow.search(criteria)

    result = workflow.select_offering(99)

    assert result.accepted is False
    assert workflow.stage == BookingStage.SELECT_BUS


async def test_roster_changes_move_passenger_count(workflow, criteria):
    await workflow.search(criteria)
    workflow.select_offering(1)

    for _ in range(5):
        workflow.add_passenger()
    assert len(workflow.roster) == 6
    assert workflow.criteria.passenger_count == 6
    assert workflow.add_passenger().accepted is False

    for _ in range(10):
        workflow.remove_passenger(0)
    assert len(workflow.roster) == 1
    assert workflow.criteria.passenger_count == 1
    assert workflow.seat_map.capacity == 1


async def test_incomplete_passengers_block_seat_selection(workflow, criteria):
    await workflow.search(criteria)
    workflow.select_offering(1)
    workflow.update_passenger(0, "name", "Asha")

    result = workflow.continue_to_seats()

    assert result.accepted is False
    assert result.message == "Please fill all details for Passenger 1"
    assert workflow.stage == BookingStage.PASSENGER_DETAILS


async def test_legacy_mode_checks_passengers_only_at_submit(auth, ledger, criteria):
    config = Settings(OFFERING_PRICE_JITTER=0, VALIDATE_PASSENGERS_BEFORE_SEATS=False)
    workflow = BookingWorkflow(auth, SyntheticOfferingProvider(price_jitter=0), ledger, config)
    await workflow.search(criteria)
    workflow.select_offering(1)

    assert workflow.continue_to_seats().accepted
    for seat in (1, 2, 3):
        workflow.toggle_seat(seat)
    assert workflow.continue_to_summary().accepted

    result = await workflow.submit()

    assert result.accepted is False
    assert result.message == "Please fill all details for Passenger 1"
    assert workflow.stage == BookingStage.SUMMARY
    assert ledger.submitted == []


async def test_summary_needs_exact_seat_count(workflow, criteria):
    await advance_to_seats(workflow, criteria)
    workflow.toggle_seat(1)
    workflow.toggle_seat(2)

    result = workflow.continue_to_summary()

    assert result.accepted is False
    assert result.message == "Please select 3 seat(s) for 3 passenger(s)"
    assert workflow.stage == BookingStage.SEAT_SELECTION
    assert workflow.draft is None


async def test_seat_limit_is_reported_not_fatal(workflow, criteria):
    await advance_to_seats(workflow, criteria)
    for seat in (1, 2, 3):
        workflow.toggle_seat(seat)

    result = workflow.toggle_seat(4)

    assert result.accepted is False
    assert result.message == "You can only select 3 seat(s) for 3 passenger(s)"
    assert workflow.seat_map.selected_seats == [1, 2, 3]


async def test_booked_seat_click_is_silent(workflow, criteria):
    await advance_to_seats(workflow, criteria)

    result = workflow.toggle_seat(5)

    assert result.accepted is False
    assert result.message is None
    assert BookingStage.SEAT_SELECTION not in workflow.messages


async def test_back_keeps_entered_data(workflow, criteria):
    await advance_to_summary(workflow, criteria)

    assert workflow.back().stage == BookingStage.SEAT_SELECTION
    assert workflow.seat_map.selected_seats == [1, 2, 3]
    assert workflow.draft is None
    assert workflow.view().draft is None

    # re-entering the summary rebuilds it
    assert workflow.continue_to_summary().accepted
    assert workflow.draft.seat_numbers == [1, 2, 3]
    assert workflow.back().accepted
    assert workflow.back().stage == BookingStage.PASSENGER_DETAILS
    assert workflow.roster.passengers[0].name == "Passenger 1"

    # fewer passengers means fewer seats
    workflow.remove_passenger(2)
    assert workflow.seat_map.selected_seats == [1, 2]

    assert workflow.back().stage == BookingStage.SELECT_BUS
    assert workflow.selected_offering is None
    assert workflow.draft is None


async def test_end_to_end_booking(workflow, ledger, criteria):
    await advance_to_summary(workflow, criteria)

    draft = workflow.draft
    assert draft.offering.unit_price == 700
    assert draft.seat_numbers == [1, 2, 3]
    assert draft.fare.base_fare == 2100
    assert draft.fare.tax_amount == 378
    assert draft.total_amount == 2508
    assert workflow.view().fare.total == 2508

    ledger.fail = True
    failed = await workflow.submit()

    assert failed.accepted is False
    assert failed.message == "Booking failed. Please try again."
    assert workflow.stage == BookingStage.SUMMARY
    assert workflow.draft is not None
    assert workflow.draft.total_amount == 2508

    ledger.fail = False
    confirmed = await workflow.submit()

    assert confirmed.accepted
    assert confirmed.stage == BookingStage.SELECT_BUS
    assert "PNR1001" in confirmed.message
    assert workflow.last_confirmation.booking_reference == "PNR1001"
    assert workflow.draft is None
    assert workflow.selected_offering is None
    assert len(ledger.submitted) == 2
    assert ledger.submitted[-1].user_id == 7


async def test_submit_is_not_reentrant(workflow, ledger, criteria):
    await advance_to_summary(workflow, criteria)
    ledger.gate = asyncio.Event()

    in_flight = asyncio.create_task(workflow.submit())
    await asyncio.sleep(0)
    assert workflow.is_submitting

    second = await workflow.submit()
    assert second.accepted is False
    assert second.message == "Booking is already being submitted"
    assert workflow.back().accepted is False

    ledger.gate.set()
    first = await in_flight

    assert first.accepted
    assert len(ledger.submitted) == 1
    assert not workflow.is_submitting


async def test_actions_outside_their_stage_are_refused(workflow, criteria):
    assert workflow.add_passenger().accepted is False
    assert workflow.toggle_seat(1).accepted is False
    assert (await workflow.submit()).accepted is False

    await workflow.search(criteria)
    assert workflow.continue_to_summary().accepted is False
    assert workflow.stage == BookingStage.SELECT_BUS


async def test_view_exposes_ui_contract(workflow, auth, criteria):
    await advance_to_seats(workflow, criteria)

    view = workflow.view()

    assert view.stage == BookingStage.SEAT_SELECTION
    assert view.seat_map.required_count == 3
    assert len(view.passengers) == 3
    assert view.fare.total == 2508
    assert view.user.username == "traveler"


async def test_booking_history_requires_login(workflow, auth):
    assert len(await workflow.booking_history()) == 1

    auth.logout()
    assert await workflow.booking_history() == []
    assert auth.redirects == 1


@pytest.mark.parametrize("ledger_fails", [True, False])
async def test_reset_during_submission_waits_for_ledger(workflow, ledger, criteria, ledger_fails):
    await advance_to_summary(workflow, criteria)
    ledger.gate = asyncio.Event()
    ledger.fail = ledger_fails

    in_flight = asyncio.create_task(workflow.submit())
    await asyncio.sleep(0)
    workflow.reset()

    # still submitting, nothing torn down yet
    assert workflow.stage == BookingStage.SUBMITTED
    assert workflow.draft is not None

    ledger.gate.set()
    result = await in_flight

    assert result.accepted is not ledger_fails
    assert result.stage == BookingStage.IDLE
    assert workflow.stage == BookingStage.IDLE
    assert workflow.draft is None
    assert workflow.roster is None
    assert workflow.seat_map is None
    assert workflow.criteria is None

    retry = await workflow.submit()
    assert retry.accepted is False
    assert workflow.back().accepted is False
    assert workflow.toggle_seat(1).accepted is False
    assert len(ledger.submitted) == 1


async def test_filtering_narrows_bus_list_in_order(workflow, criteria):
    await workflow.search(criteria)

    result = workflow.filter_offerings(
        OfferingFilter(max_price=700, departure_window=DepartureWindow.MORNING)
    )

    assert result.accepted
    view = workflow.view()
    assert [o.id for o in view.filtered_offerings] == [1, 2, 9, 10]
    assert len(view.offerings) == 12
    assert view.operators[0] == "BoardEasy Express"
    assert len(view.operators) == 6


async def test_hidden_offering_cannot_be_selected(workflow, criteria):
    await workflow.search(criteria)
    workflow.filter_offerings(OfferingFilter(vehicle_class="sleeper"))

    assert workflow.select_offering(2).accepted is False
    assert workflow.select_offering(5).stage == BookingStage.PASSENGER_DETAILS


async def test_new_search_clears_filter(workflow, criteria):
    assert workflow.filter_offerings(OfferingFilter(max_price=600)).accepted is False

    await workflow.search(criteria)
    workflow.filter_offerings(OfferingFilter(max_price=600))
    assert len(workflow.filtered_offerings) == 3

    workflow.back()
    await workflow.search(criteria)
    assert workflow.offering_filter == OfferingFilter()
    assert len(workflow.filtered_offerings) == 12
