from __future__ import annotations
import logging
from typing import Callable, List, Optional, Sequence

from PySide6.QtCore import QUrl
from PySide6.QtGui import QDesktopServices
from PySide6.QtWidgets import (
    QDialog, QGridLayout, QGroupBox, QHBoxLayout, QHeaderView, QLabel, QLineEdit,
    QMainWindow, QMessageBox, QPushButton, QTabWidget, QTableWidget,
    QTableWidgetItem, QVBoxLayout, QWidget
)

from oris.app_context import AppContext
from oris.errors import NotFoundError, OrisError, StoreError
from oris.models.quote import QuoteStatus
from oris.models.invoice import InvoiceStatus
from oris.services.dashboard_service import Dashboard
from oris.services.document_service import DocumentView, date_fr, eur
from oris.ui.widgets.certification_form import CertificationForm
from oris.ui.widgets.client_form import ClientForm
from oris.ui.widgets.quote_editor import QuoteEditor
from oris.ui.widgets.session_form import SessionForm
from oris.ui.widgets.settings_panel import SettingsPanel
from oris.ui.widgets.trainee_dialog import TraineeDialog
from oris.ui.widgets.training_form import TrainingForm

logger = logging.getLogger(__name__)

ALERT_WITHIN_DAYS = 60


def make_table(headers: Sequence[str]) -> QTableWidget:
    """Table en lecture seule ; la dernière colonne (masquée) porte l'ID."""
    tbl = QTableWidget(0, len(headers) + 1)
    tbl.setHorizontalHeaderLabels(list(headers) + ["ID"])
    tbl.horizontalHeader().setSectionResizeMode(QHeaderView.Stretch)
    tbl.setSelectionBehavior(tbl.SelectionBehavior.SelectRows)
    tbl.setEditTriggers(tbl.EditTrigger.NoEditTriggers)
    tbl.setColumnHidden(len(headers), True)
    return tbl


def fill_table(tbl: QTableWidget, rows: Sequence[Sequence[str]], ids: Sequence[str]) -> None:
    tbl.setRowCount(0)
    for values, row_id in zip(rows, ids):
        r = tbl.rowCount()
        tbl.insertRow(r)
        for col, v in enumerate(values):
            tbl.setItem(r, col, QTableWidgetItem(v))
        tbl.setItem(r, len(values), QTableWidgetItem(row_id))
    tbl.resizeRowsToContents()


def selected_id(tbl: QTableWidget) -> Optional[str]:
    row = tbl.currentRow()
    if row < 0:
        return None
    item = tbl.item(row, tbl.columnCount() - 1)
    return item.text() if item else None


def button_bar(*buttons: QPushButton, right: Sequence[QPushButton] = ()) -> QHBoxLayout:
    bar = QHBoxLayout()
    for b in buttons:
        bar.addWidget(b)
    bar.addStretch(1)
    for b in right:
        bar.addWidget(b)
    return bar


class MainWindow(QMainWindow):
    def __init__(self, ctx: AppContext):
        super().__init__()
        self.ctx = ctx
        self.setWindowTitle("ORIS FORMATION - Gestion")
        self.resize(1280, 800)
        self._unsubscribers: List[Callable[[], None]] = []

        self.tabs = QTabWidget()
        self.setCentralWidget(self.tabs)

        self.tabs.addTab(self._dashboard_tab(), "Tableau de bord")
        self.tabs.addTab(self._clients_tab(), "Clients")
        self.tabs.addTab(self._quotes_tab(), "Devis")
        self.tabs.addTab(self._invoices_tab(), "Factures")
        self.tabs.addTab(self._sessions_tab(), "Sessions")
        self.tabs.addTab(self._catalog_tab(), "Catalogue")
        self.settings_panel = SettingsPanel(self, ctx.company)
        self.tabs.addTab(self.settings_panel, "Paramètres")

        self._subscribe()

    # ==================== Synchronisation ====================
    def _subscribe(self):
        store = self.ctx.store
        wiring = [
            (store.clients, self._refresh_clients),
            (store.clients, self._refresh_quotes),
            (store.clients, self._refresh_invoices),
            (store.quotes, self._refresh_quotes),
            (store.invoices, self._refresh_invoices),
            (store.sessions, self._refresh_sessions),
            (store.catalog, self._refresh_catalog),
            (store.catalog, self._refresh_sessions),
            (store.invoices, self._refresh_dashboard),
            (store.quotes, self._refresh_dashboard),
            (store.sessions, self._refresh_dashboard),
            (store.certifications, self._refresh_dashboard),
        ]
        for repo, refresh in wiring:
            self._unsubscribers.append(repo.subscribe(lambda _rows, fn=refresh: fn()))

    def closeEvent(self, event):
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()
        super().closeEvent(event)

    def _run(self, title: str, action: Callable[[], object]) -> Optional[object]:
        """Exécute une action métier ; les erreurs sont affichées, jamais relancées."""
        try:
            return action()
        except StoreError as e:
            logger.error("%s : %s", title, e)
            QMessageBox.critical(self, title, str(e))
        except OrisError as e:
            QMessageBox.warning(self, title, str(e))
        except OSError as e:
            logger.error("%s : %s", title, e)
            QMessageBox.critical(self, title, f"Écriture du fichier impossible : {e}")
        return None

    def _open_document(self, title: str, build: Callable[[], DocumentView]):
        view = self._run(title, build)
        if view is None:
            return
        result = self._run(title, lambda: self.ctx.documents.export_or_print(view))
        if result is None:
            return
        path, is_pdf = result
        if is_pdf:
            QMessageBox.information(self, title, f"Fichier généré :\n{path}")
        else:
            QMessageBox.information(
                self, title,
                "PDF indisponible : la page s'ouvre dans le navigateur.\n"
                "Utilisez Imprimer > Enregistrer au format PDF.",
            )
        QDesktopServices.openUrl(QUrl.fromLocalFile(str(path)))

    # ==================== TABLEAU DE BORD ====================
    def _dashboard_tab(self):
        w = QWidget()
        root = QVBoxLayout(w)

        grid = QGridLayout()
        self.kpi_labels = {}
        for i, (key, title) in enumerate([
            ("revenue", "CA encaissé (année)"),
            ("pending", "À encaisser"),
            ("overdue", "En retard"),
            ("quotes", "Devis en attente"),
            ("sessions", "Sessions à venir"),
            ("paid", "Payé (global)"),
        ]):
            box = QGroupBox(title)
            lay = QVBoxLayout(box)
            lab = QLabel("—")
            lab.setStyleSheet("font-size: 20px; font-weight: bold;")
            lay.addWidget(lab)
            self.kpi_labels[key] = lab
            grid.addWidget(box, i // 3, i % 3)
        root.addLayout(grid)
        self.lab_trend = QLabel()
        root.addWidget(self.lab_trend)

        self.tbl_months = QTableWidget(1, 12)
        self.tbl_months.setEditTriggers(self.tbl_months.EditTrigger.NoEditTriggers)
        self.tbl_months.horizontalHeader().setSectionResizeMode(QHeaderView.Stretch)
        self.tbl_months.setVerticalHeaderLabels(["CA HT"])
        self.tbl_months.setMaximumHeight(80)
        root.addWidget(self.tbl_months)

        grp = QGroupBox("Habilitations à renouveler")
        lay = QVBoxLayout(grp)
        btn_add = QPushButton("Nouvelle habilitation")
        btn_del = QPushButton("Supprimer")
        btn_contact = QPushButton("Contacter l'entreprise")
        btn_seed = QPushButton("Charger la démo")
        lay.addLayout(button_bar(btn_add, btn_del, btn_contact, right=[btn_seed]))
        self.tbl_alerts = make_table(["Stagiaire", "Entreprise", "Niveau", "Échéance"])
        lay.addWidget(self.tbl_alerts)
        root.addWidget(grp, 1)

        btn_add.clicked.connect(self._certification_new)
        btn_del.clicked.connect(self._certification_delete)
        btn_contact.clicked.connect(self._certification_contact)
        btn_seed.clicked.connect(self._seed_demo)
        return w

    def _refresh_dashboard(self):
        d: Dashboard = self.ctx.dashboard.snapshot(alert_within_days=ALERT_WITHIN_DAYS)
        self.kpi_labels["revenue"].setText(eur(d.current_year_revenue))
        self.kpi_labels["pending"].setText(eur(d.pending_revenue))
        self.kpi_labels["overdue"].setText(eur(d.overdue_revenue))
        self.kpi_labels["quotes"].setText(str(d.pending_quotes))
        self.kpi_labels["sessions"].setText(str(d.upcoming_sessions))
        self.kpi_labels["paid"].setText(eur(max(0.0, d.paid_global)))
        self.lab_trend.setText(f"Tendance {d.year} : {d.trend_label}")
        self.tbl_months.setHorizontalHeaderLabels([m.name for m in d.monthly])
        for col, m in enumerate(d.monthly):
            self.tbl_months.setItem(0, col, QTableWidgetItem(eur(m.revenue)))
        fill_table(
            self.tbl_alerts,
            [[c.trainee_name, c.company_name, c.level, date_fr(c.expiry_date)] for c in d.certification_alerts],
            [c.id for c in d.certification_alerts],
        )

    def _certification_new(self):
        dlg = CertificationForm(self, self.ctx.clients.list_clients())
        if dlg.exec() == QDialog.Accepted:
            cert = dlg.get_certification()
            if not cert:
                QMessageBox.warning(self, "Validation", "Stagiaire et niveau sont obligatoires.")
                return
            self._run("Habilitations", lambda: self.ctx.certifications.add(cert))

    def _certification_delete(self):
        cid = selected_id(self.tbl_alerts)
        if not cid:
            QMessageBox.information(self, "Habilitations", "Sélectionne une ligne d'abord.")
            return
        if QMessageBox.question(self, "Suppression", "Supprimer cette habilitation ?") == QMessageBox.Yes:
            self._run("Habilitations", lambda: self.ctx.certifications.delete(cid))

    def _certification_contact(self):
        row = self.tbl_alerts.currentRow()
        if row < 0:
            QMessageBox.information(self, "Habilitations", "Sélectionne une ligne d'abord.")
            return
        company = self.tbl_alerts.item(row, 1).text()
        try:
            c = self.ctx.certifications.company_contact(company)
        except NotFoundError:
            QMessageBox.warning(
                self, "Contact",
                f"Coordonnées introuvables pour l'entreprise : « {company} ».\n"
                "Vérifiez que le client existe dans la base.",
            )
            return
        QMessageBox.information(
            self, "Contact",
            f"Entreprise : {c.name}\nTéléphone : {c.phone}\nContact : {c.contact_name}",
        )

    def _seed_demo(self):
        if not self.ctx.seed.is_empty():
            QMessageBox.information(self, "Démo", "La base contient déjà des données.")
            return
        counts = self._run("Démo", self.ctx.seed.seed_demo_data)
        if counts:
            self.settings_panel.reload()
            QMessageBox.information(self, "Démo", f"Données de démonstration chargées ({sum(counts.values())} éléments).")

    # ==================== CLIENTS ====================
    def _clients_tab(self):
        w = QWidget()
        root = QVBoxLayout(w)
        btn_new = QPushButton("Nouveau")
        btn_edit = QPushButton("Modifier")
        btn_del = QPushButton("Supprimer")
        self.ed_search = QLineEdit()
        self.ed_search.setPlaceholderText("Rechercher (raison sociale, contact)…")
        bar = button_bar(btn_new, btn_edit, btn_del)
        bar.addWidget(self.ed_search, 1)
        root.addLayout(bar)

        self.tbl_clients = make_table(["Raison sociale", "Contact", "Email", "Téléphone", "Ville", "Statut"])
        root.addWidget(self.tbl_clients, 1)

        btn_new.clicked.connect(self._client_new)
        btn_edit.clicked.connect(self._client_edit)
        btn_del.clicked.connect(self._client_delete)
        self.ed_search.textChanged.connect(lambda _t: self._refresh_clients())
        return w

    def _refresh_clients(self):
        items = self.ctx.clients.search(self.ed_search.text())
        fill_table(
            self.tbl_clients,
            [[c.name, c.contact_name, c.email or "", c.phone, c.city, c.status.value] for c in items],
            [c.id for c in items],
        )

    def _client_new(self):
        dlg = ClientForm(self)
        if dlg.exec() == QDialog.Accepted:
            c = dlg.get_client()
            if not c:
                QMessageBox.warning(self, "Validation", dlg.error or "Saisie invalide.")
                return
            self._run("Clients", lambda: self.ctx.clients.add_client(c))

    def _client_edit(self):
        cid = selected_id(self.tbl_clients)
        if not cid:
            QMessageBox.information(self, "Clients", "Sélectionne une ligne d'abord.")
            return
        current = self._run("Clients", lambda: self.ctx.clients.get(cid))
        if not current:
            return
        dlg = ClientForm(self, client=current)
        if dlg.exec() == QDialog.Accepted:
            c = dlg.get_client()
            if not c:
                QMessageBox.warning(self, "Validation", dlg.error or "Saisie invalide.")
                return
            self._run("Clients", lambda: self.ctx.clients.update_client(c))

    def _client_delete(self):
        cid = selected_id(self.tbl_clients)
        if not cid:
            QMessageBox.information(self, "Clients", "Sélectionne une ligne d'abord.")
            return
        if QMessageBox.question(self, "Suppression", "Supprimer ce client ?") == QMessageBox.Yes:
            self._run("Clients", lambda: self.ctx.clients.delete_client(cid))

    # ==================== DEVIS ====================
    def _quotes_tab(self):
        w = QWidget()
        root = QVBoxLayout(w)
        btn_new = QPushButton("Nouveau devis")
        btn_del = QPushButton("Supprimer")
        btn_accept = QPushButton("Accepté")
        btn_refuse = QPushButton("Refusé")
        btn_convert = QPushButton("Convertir en facture")
        btn_pdf = QPushButton("PDF / Imprimer")
        root.addLayout(button_bar(btn_new, btn_del, btn_accept, btn_refuse, right=[btn_convert, btn_pdf]))

        self.tbl_quotes = make_table(["Numéro", "Client", "Date", "Validité", "Statut", "Total HT", "Total TTC"])
        root.addWidget(self.tbl_quotes, 1)

        btn_new.clicked.connect(self._quote_new)
        btn_del.clicked.connect(self._quote_delete)
        btn_accept.clicked.connect(lambda: self._quote_status(QuoteStatus.ACCEPTED))
        btn_refuse.clicked.connect(lambda: self._quote_status(QuoteStatus.REJECTED))
        btn_convert.clicked.connect(self._quote_convert)
        btn_pdf.clicked.connect(self._quote_pdf)
        return w

    def _refresh_quotes(self):
        items = self.ctx.quotes.list_quotes()
        fill_table(
            self.tbl_quotes,
            [[q.number, self.ctx.clients.display_name(q.client_id), date_fr(q.date),
              date_fr(q.valid_until), q.status.value, eur(q.total_ht), eur(q.total_ttc)] for q in items],
            [q.id for q in items],
        )

    def _selected_quote(self) -> Optional[str]:
        qid = selected_id(self.tbl_quotes)
        if not qid:
            QMessageBox.information(self, "Devis", "Sélectionne un devis.")
        return qid

    def _quote_new(self):
        dlg = QuoteEditor(
            self,
            clients=self.ctx.clients.list_clients(),
            draft=self.ctx.quotes.new_draft(),
            trainings=self.ctx.catalog.list_trainings(),
        )
        if dlg.exec() == QDialog.Accepted:
            values = dlg.get_values()
            if not values:
                QMessageBox.warning(self, "Validation", "Veuillez sélectionner un client")
                return
            client_id, lines, valid_until, notes = values
            q = self._run("Devis", lambda: self.ctx.quotes.save(client_id, lines, valid_until=valid_until, notes=notes))
            if q:
                QMessageBox.information(self, "Devis", f"Devis {q.number} enregistré.")

    def _quote_delete(self):
        qid = self._selected_quote()
        if qid and QMessageBox.question(self, "Suppression", "Supprimer ce devis ?") == QMessageBox.Yes:
            self._run("Devis", lambda: self.ctx.quotes.delete_quote(qid))

    def _quote_status(self, status: QuoteStatus):
        qid = self._selected_quote()
        if qid:
            self._run("Devis", lambda: self.ctx.quotes.update_status(qid, status))

    def _quote_convert(self):
        qid = self._selected_quote()
        if not qid:
            return
        inv = self._run("Conversion", lambda: self.ctx.quotes.convert_to_invoice(qid))
        if inv:
            QMessageBox.information(self, "Conversion", f"Facture {inv.number} créée.")
            self.tabs.setCurrentIndex(3)

    def _quote_pdf(self):
        qid = self._selected_quote()
        if qid:
            self._open_document("PDF devis", lambda: self.ctx.documents.quote_view(qid))

    # ==================== FACTURES ====================
    def _invoices_tab(self):
        w = QWidget()
        root = QVBoxLayout(w)
        btn_paid = QPushButton("Marquer payée")
        btn_credit = QPushButton("Créer un avoir")
        btn_pdf = QPushButton("PDF / Imprimer")
        root.addLayout(button_bar(btn_paid, btn_credit, right=[btn_pdf]))

        self.tbl_invoices = make_table(["Numéro", "Type", "Client", "Date", "Échéance", "Statut", "Total HT", "Total TTC"])
        root.addWidget(self.tbl_invoices, 1)

        btn_paid.clicked.connect(self._invoice_paid)
        btn_credit.clicked.connect(self._invoice_credit_note)
        btn_pdf.clicked.connect(self._invoice_pdf)
        return w

    def _refresh_invoices(self):
        items = self.ctx.invoices.list_invoices()
        fill_table(
            self.tbl_invoices,
            [[i.number, "Avoir" if i.is_credit_note else "Facture", self.ctx.clients.display_name(i.client_id),
              date_fr(i.date), date_fr(i.due_date), i.status.value, eur(i.total_ht), eur(i.total_ttc)]
             for i in items],
            [i.id for i in items],
        )

    def _selected_invoice(self) -> Optional[str]:
        iid = selected_id(self.tbl_invoices)
        if not iid:
            QMessageBox.information(self, "Factures", "Sélectionne une facture.")
        return iid

    def _invoice_paid(self):
        iid = self._selected_invoice()
        if iid:
            self._run("Factures", lambda: self.ctx.invoices.update_status(iid, InvoiceStatus.PAID))

    def _invoice_credit_note(self):
        iid = self._selected_invoice()
        if not iid:
            return
        if QMessageBox.question(
            self, "Avoir", "Créer un avoir annulant totalement cette facture ?"
        ) != QMessageBox.Yes:
            return
        note = self._run("Avoir", lambda: self.ctx.invoices.create_credit_note(iid))
        if note:
            QMessageBox.information(self, "Avoir", f"Avoir {note.number} créé.")

    def _invoice_pdf(self):
        iid = self._selected_invoice()
        if iid:
            self._open_document("PDF facture", lambda: self.ctx.documents.invoice_view(iid))

    # ==================== SESSIONS ====================
    def _sessions_tab(self):
        w = QWidget()
        root = QVBoxLayout(w)
        btn_new = QPushButton("Planifier")
        btn_edit = QPushButton("Modifier")
        btn_del = QPushButton("Supprimer")
        btn_trainees = QPushButton("Stagiaires…")
        btn_attendance = QPushButton("Émargement")
        btn_certs = QPushButton("Attestations")
        btn_ics = QPushButton("Exporter (Agenda)")
        root.addLayout(button_bar(btn_new, btn_edit, btn_del, btn_trainees,
                                  right=[btn_attendance, btn_certs, btn_ics]))

        self.tbl_sessions = make_table(["Formation", "Client", "Début", "Fin", "Formateur", "Lieu", "Stagiaires"])
        root.addWidget(self.tbl_sessions, 1)

        btn_new.clicked.connect(self._session_new)
        btn_edit.clicked.connect(self._session_edit)
        btn_del.clicked.connect(self._session_delete)
        btn_trainees.clicked.connect(self._session_trainees)
        btn_attendance.clicked.connect(
            lambda: self._session_document("Émargement", self.ctx.documents.attendance_sheet))
        btn_certs.clicked.connect(
            lambda: self._session_document("Attestations", self.ctx.documents.certificate_set))
        btn_ics.clicked.connect(self._session_ics)
        return w

    def _refresh_sessions(self):
        trainings = {t.id: t for t in self.ctx.catalog.list_trainings()}
        items = self.ctx.sessions.list_sessions()
        rows = []
        for s in items:
            t = trainings.get(s.training_id)
            rows.append([
                t.title if t else "Formation inconnue",
                self.ctx.clients.display_name(s.client_id),
                date_fr(s.start_date), date_fr(s.end_date), s.trainer, s.location,
                f"{len(s.trainees)} / {s.trainees_count}",
            ])
        fill_table(self.tbl_sessions, rows, [s.id for s in items])

    def _selected_session(self) -> Optional[str]:
        sid = selected_id(self.tbl_sessions)
        if not sid:
            QMessageBox.information(self, "Sessions", "Sélectionne une session.")
        return sid

    def _session_form(self, session=None) -> Optional[dict]:
        dlg = SessionForm(
            self,
            trainings=self.ctx.catalog.list_trainings(),
            clients=self.ctx.clients.list_clients(),
            session=session,
        )
        if dlg.exec() != QDialog.Accepted:
            return None
        values = dlg.get_values()
        if not values:
            QMessageBox.warning(self, "Validation", dlg.error or "Saisie invalide.")
        return values

    def _session_new(self):
        values = self._session_form()
        if values:
            self._run("Sessions", lambda: self.ctx.sessions.schedule(**values))

    def _session_edit(self):
        sid = self._selected_session()
        if not sid:
            return
        current = self._run("Sessions", lambda: self.ctx.sessions.get(sid))
        if not current:
            return
        values = self._session_form(current)
        if values:
            updated = current.model_copy(update=values)
            self._run("Sessions", lambda: self.ctx.sessions.update(updated))

    def _session_delete(self):
        sid = self._selected_session()
        if sid and QMessageBox.question(self, "Suppression", "Supprimer cette session ?") == QMessageBox.Yes:
            self._run("Sessions", lambda: self.ctx.sessions.delete(sid))

    def _session_trainees(self):
        sid = self._selected_session()
        if sid:
            TraineeDialog(self, self.ctx.sessions, sid).exec()

    def _session_document(self, title: str, build: Callable[[str], DocumentView]):
        sid = self._selected_session()
        if sid:
            self._open_document(title, lambda: build(sid))

    def _session_ics(self):
        sid = self._selected_session()
        if not sid:
            return
        path = self._run("Agenda", lambda: self.ctx.calendar.export_session_ics(sid))
        if path:
            QMessageBox.information(self, "Agenda", f"ICS généré : {path}")

    # ==================== CATALOGUE ====================
    def _catalog_tab(self):
        w = QWidget()
        root = QVBoxLayout(w)
        btn_new = QPushButton("Nouvelle formation")
        btn_edit = QPushButton("Modifier")
        btn_del = QPushButton("Supprimer")
        root.addLayout(button_bar(btn_new, btn_edit, btn_del))

        self.tbl_catalog = make_table(["Référence", "Intitulé", "Catégorie", "Durée", "Prix HT"])
        root.addWidget(self.tbl_catalog, 1)

        btn_new.clicked.connect(self._training_new)
        btn_edit.clicked.connect(self._training_edit)
        btn_del.clicked.connect(self._training_delete)
        return w

    def _refresh_catalog(self):
        items = self.ctx.catalog.list_trainings()
        fill_table(
            self.tbl_catalog,
            [[t.reference, t.title, t.category.value,
              f"{t.duration_days:g} j ({t.duration_hours:g} h)", eur(t.price_ht)] for t in items],
            [t.id for t in items],
        )

    def _training_new(self):
        dlg = TrainingForm(self)
        if dlg.exec() == QDialog.Accepted:
            t = dlg.get_training()
            if not t:
                QMessageBox.warning(self, "Validation", "Référence et intitulé sont obligatoires.")
                return
            self._run("Catalogue", lambda: self.ctx.catalog.add_training(t))

    def _training_edit(self):
        tid = selected_id(self.tbl_catalog)
        if not tid:
            QMessageBox.information(self, "Catalogue", "Sélectionne une ligne d'abord.")
            return
        current = self._run("Catalogue", lambda: self.ctx.catalog.get(tid))
        if not current:
            return
        dlg = TrainingForm(self, training=current)
        if dlg.exec() == QDialog.Accepted:
            t = dlg.get_training()
            if not t:
                QMessageBox.warning(self, "Validation", "Référence et intitulé sont obligatoires.")
                return
            self._run("Catalogue", lambda: self.ctx.catalog.update_training(t))

    def _training_delete(self):
        tid = selected_id(self.tbl_catalog)
        if not tid:
            QMessageBox.information(self, "Catalogue", "Sélectionne une ligne d'abord.")
            return
        if QMessageBox.question(self, "Suppression", "Supprimer cette formation ?") == QMessageBox.Yes:
            self._run("Catalogue", lambda: self.ctx.catalog.delete_training(tid))
