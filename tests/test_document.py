# -*- coding: utf-8 -
#
# This file is part of couchcast released under the MIT license.
# See the NOTICE for more information.

import io
import logging
import unittest

import jsonobject

from couchcast import Server, Document, DocumentSchema, Property, \
ResourceNotFound, contain, set_logging

from couchfake import FakeCouchSession


class Address(DocumentSchema):
    street = Property()
    details = Property(default={})
    city = Property(required=True)


class Contact(Document):
    name = Property()
    address = Property(cast_as='Address')
    previous_addresses = Property(cast_as=['Address'])


class Memo(Document):
    text = Property()


class DocumentTestCase(unittest.TestCase):

    def setUp(self):
        self.session = FakeCouchSession()
        self.server = Server(session=self.session)
        self.db = self.server.create_db('couchcast_test')
        contain(self.db, Contact, Memo)

    def tearDown(self):
        contain(None, Contact, Memo)

    def testNoDatabase(self):
        contain(None, Memo)
        self.assertRaises(TypeError, Memo.get_db)
        self.assertRaises(TypeError, Memo(text='a').save)

    def testSave(self):
        memo = Memo(text='hello')
        self.assertTrue(memo.new_document)
        self.assertIsNone(memo.id)
        self.assertTrue(memo.save())
        self.assertFalse(memo.new_document)
        self.assertIsNotNone(memo.id)
        self.assertTrue(memo.rev.startswith('1-'))

        stored = self.db.get(memo.id)
        self.assertEqual(stored['text'], 'hello')
        self.assertEqual(stored['doc_type'], 'Memo')

    def testJsonForm(self):
        memo = Memo(text='hello')
        self.assertIsInstance(memo, jsonobject.JsonObject)
        self.assertEqual(memo.to_json(), {'doc_type': 'Memo', 'text': 'hello'})
        memo.save()
        data = memo.to_json()
        self.assertEqual(data['_id'], memo.id)
        self.assertEqual(data['_rev'], memo.rev)
        self.assertEqual(Memo.wrap(data), memo)

    def testSetId(self):
        memo = Memo(text='hello')
        memo.id = 'memo1'
        memo.save()
        self.assertIn('memo1', self.db)
        def set_bad_id():
            memo.id = '_bad'
        self.assertRaises(TypeError, set_bad_id)

    def testGet(self):
        memo = Memo(text='hello')
        memo.save()
        memo2 = Memo.get(memo.id)
        self.assertIsInstance(memo2, Memo)
        self.assertEqual(memo2.text, 'hello')
        self.assertEqual(memo2, memo)
        self.assertRaises(ResourceNotFound, Memo.get, 'missing')

    def testGetRev(self):
        memo = Memo(text='hello')
        memo.save()
        first_rev = memo.rev
        memo.text = 'bye'
        memo.save()
        self.assertTrue(memo.rev.startswith('2-'))
        self.assertIsInstance(Memo.get(memo.id, rev=first_rev), Memo)
        requested = self.session.requests[-1]
        self.assertEqual(requested[2], {'rev': first_rev})

    def testGetOtherDatabase(self):
        other = self.server.create_db('couchcast_test2')
        data = Memo(text='elsewhere').to_json()
        other.save_doc(data)
        self.assertEqual(Memo.get(data['_id'], db=other).text, 'elsewhere')
        self.assertNotIn(data['_id'], self.db)

    def testInstanceGetIsMappingGet(self):
        memo = Memo(text='hello')
        self.assertEqual(memo.get('text'), 'hello')
        self.assertEqual(memo.get('missing', 'default'), 'default')

    def testDelete(self):
        memo = Memo(text='hello')
        self.assertRaises(TypeError, memo.delete)
        memo.save()
        docid = memo.id
        memo.delete()
        self.assertNotIn(docid, self.db)
        self.assertTrue(memo.new_document)
        self.assertIsNone(memo.id)
        self.assertNotIn('_deleted', memo)


class SavedCastedModelTestCase(unittest.TestCase):

    def setUp(self):
        self.server = Server(session=FakeCouchSession())
        self.db = self.server.create_db('couchcast_test')
        Contact.set_db(self.db)
        contact = Contact(name='Jean', address={'city': 'Paris'})
        self.assertTrue(contact.save())
        self.contact = Contact.get(contact.id)

    def tearDown(self):
        Contact.set_db(None)

    def testLoadedWithCastedModels(self):
        address = self.contact.address
        self.assertIsNotNone(address)
        self.assertIs(type(address), Address)
        self.assertIs(address.casted_by, self.contact)
        self.assertEqual(self.contact.previous_addresses, [])

    def testGetters(self):
        self.assertEqual(self.contact.address.city, 'Paris')

    def testSetters(self):
        address = self.contact.address
        address.city = 'Lyon'
        self.assertEqual(address.city, 'Lyon')

    def testRetainOverrideOfDefault(self):
        address = self.contact.address
        address.details['color'] = 'orange'
        self.assertTrue(self.contact.save())
        address = Contact.get(self.contact.id).address
        self.assertEqual(address.details['color'], 'orange')

    def testSaveCastedArray(self):
        self.contact.previous_addresses.append({'city': 'Nantes'})
        self.contact.previous_addresses.append(Address(city='Brest'))
        self.assertTrue(self.contact.save())

        contact = Contact.get(self.contact.id)
        cities = [a.city for a in contact.previous_addresses]
        self.assertEqual(cities, ['Nantes', 'Brest'])
        for address in contact.previous_addresses:
            self.assertIs(type(address), Address)
            self.assertIs(address.casted_by, contact)

    def testInvalidCastedModelIsNotSaved(self):
        rev = self.contact.rev
        self.contact.previous_addresses.append({'street': 'Rue de la Paix'})
        self.assertFalse(self.contact.save())
        self.assertFalse(self.contact.errors)
        self.assertTrue(self.contact.previous_addresses[0].errors)
        self.assertEqual(Contact.get(self.contact.id).rev, rev)

        self.contact.previous_addresses[0].city = 'Paris'
        self.assertTrue(self.contact.save())
        self.assertNotEqual(self.contact.rev, rev)


class LoggingTestCase(unittest.TestCase):

    def testSetLogging(self):
        stream = io.StringIO()
        handler = logging.StreamHandler(stream)
        set_logging('debug', handler=handler)
        try:
            Server(session=FakeCouchSession()).create_db('couchcast_test')
        finally:
            logger = logging.getLogger('couchcast')
            logger.removeHandler(handler)
            logger.setLevel(logging.NOTSET)
        self.assertIn('[DEBUG]', stream.getvalue())


if __name__ == '__main__':
    unittest.main()
